"""Tax ID validators — tests for the CPF/CNPJ checksum functions.

Tests cover:
    - Known valid values (bare and masked) pass
    - Flipping a check digit fails
    - Wrong lengths and repeated-digit sequences fail
    - Total functions: None, non-str and garbage return False without raising
"""

import pytest

from bankard.core.tax_id import (
    is_valid_holder_document,
    is_valid_tax_id_primary,
    is_valid_tax_id_secondary,
    only_digits,
)

VALID_CPF = "12345678909"
VALID_CNPJ = "11222333000181"


# ─── Primary (CPF) ───────────────────────────────────────────────

def test_primary_accepts_known_valid_value():
    assert is_valid_tax_id_primary(VALID_CPF)


def test_primary_accepts_masked_value():
    assert is_valid_tax_id_primary("123.456.789-09")


def test_primary_rejects_flipped_last_digit():
    assert not is_valid_tax_id_primary("12345678908")


def test_primary_rejects_flipped_first_check_digit():
    assert not is_valid_tax_id_primary("12345678919")


def test_primary_rejects_repeated_digits():
    assert not is_valid_tax_id_primary("11111111111")


@pytest.mark.parametrize("digit", "0123456789")
def test_primary_rejects_every_repeated_sequence(digit):
    assert not is_valid_tax_id_primary(digit * 11)


def test_primary_check_digit_zero_when_remainder_below_two():
    # 123456789 has weighted sum 210, remainder 1 -> first check digit 0
    assert is_valid_tax_id_primary("12345678909")


@pytest.mark.parametrize("value", ["", "1234567890", "123456789091", "abc"])
def test_primary_rejects_wrong_length(value):
    assert not is_valid_tax_id_primary(value)


# ─── Secondary (CNPJ) ────────────────────────────────────────────

def test_secondary_accepts_known_valid_value():
    assert is_valid_tax_id_secondary(VALID_CNPJ)


def test_secondary_accepts_masked_value():
    assert is_valid_tax_id_secondary("11.222.333/0001-81")


def test_secondary_rejects_flipped_last_digit():
    assert not is_valid_tax_id_secondary("11222333000182")


def test_secondary_rejects_repeated_digits():
    assert not is_valid_tax_id_secondary("00000000000000")


def test_secondary_rejects_primary_length():
    assert not is_valid_tax_id_secondary(VALID_CPF)


# ─── Totality ────────────────────────────────────────────────────

@pytest.mark.parametrize("value", [None, 12345678909, 3.5, b"12345678909", [], "٣٣٣"])
def test_validators_never_raise(value):
    assert is_valid_tax_id_primary(value) is False
    assert is_valid_tax_id_secondary(value) is False


def test_holder_document_accepts_either_format():
    assert is_valid_holder_document(VALID_CPF)
    assert is_valid_holder_document(VALID_CNPJ)
    assert not is_valid_holder_document("123")


def test_only_digits_strips_masks_and_non_ascii_digits():
    assert only_digits("123.456.789-09") == "12345678909"
    assert only_digits("٣12") == "12"
    assert only_digits(None) == ""
