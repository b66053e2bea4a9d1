"""Tax ID Validation — checksum validators for the two Brazilian national tax id formats.

Invariants:
    - All validators are total: any input (None, non-str, garbage) returns False, never raises
    - Non-digit characters are stripped before validation (masks like 123.456.789-09 accepted)
    - Sequences of identical digits are rejected even though their checksums happen to match

Design Decisions:
    - Primary (CPF, 11 digits) and secondary (CNPJ, 14 digits) share one remainder rule
    - Pure functions in core: forms call these directly, the directory never validates documents
"""

import re

_NON_DIGIT = re.compile(r"\D", re.ASCII)

PRIMARY_LENGTH = 11
SECONDARY_LENGTH = 14


def only_digits(value: object) -> str:
    """Strip everything but ASCII digits. Non-str input yields an empty string."""
    if not isinstance(value, str):
        return ""
    return _NON_DIGIT.sub("", value)


def _check_digit(weighted_sum: int) -> int:
    remainder = weighted_sum % 11
    return 0 if remainder < 2 else 11 - remainder


def _is_repeated(digits: str) -> bool:
    return len(set(digits)) == 1


def _primary_digit(digits: str, count: int) -> int:
    # weights run from count+1 down to 2
    total = sum(int(d) * w for d, w in zip(digits[:count], range(count + 1, 1, -1)))
    return _check_digit(total)


def _secondary_digit(digits: str, count: int) -> int:
    # cyclic weights: start at count-7, decrement to 2, wrap to 9
    total = 0
    weight = count - 7
    for d in digits[:count]:
        total += int(d) * weight
        weight -= 1
        if weight < 2:
            weight = 9
    return _check_digit(total)


def is_valid_tax_id_primary(value: object) -> bool:
    """Validate an individual tax id (CPF)."""
    digits = only_digits(value)
    if len(digits) != PRIMARY_LENGTH or _is_repeated(digits):
        return False
    return (
        _primary_digit(digits, 9) == int(digits[9])
        and _primary_digit(digits, 10) == int(digits[10])
    )


def is_valid_tax_id_secondary(value: object) -> bool:
    """Validate a legal-entity tax id (CNPJ)."""
    digits = only_digits(value)
    if len(digits) != SECONDARY_LENGTH or _is_repeated(digits):
        return False
    length = SECONDARY_LENGTH - 2
    return (
        _secondary_digit(digits, length) == int(digits[length])
        and _secondary_digit(digits, length + 1) == int(digits[length + 1])
    )


def is_valid_holder_document(value: object) -> bool:
    """Either format is accepted as a holder document at sign-up."""
    return is_valid_tax_id_primary(value) or is_valid_tax_id_secondary(value)
