"""Language Strings tests — pure data functions for user-facing error texts.

Tests cover:
    - Every taxonomy key and every operation has text in every locale
    - Not-found text includes the resource, with a generic fallback
"""

import pytest

from bankard.core.domain_types import Locale, Operation
from bankard.core.language_strings import (
    format_not_found,
    get_error_message,
    get_operation_fallback,
)

_KEYS = [
    "unauthorized", "forbidden", "bad_request", "server_error",
    "network_error", "timeout", "unexpected", "storage",
]


@pytest.mark.parametrize("key", _KEYS)
def test_static_messages_cover_all_locales(key):
    for locale in Locale:
        assert get_error_message(key, locale)


def test_operation_fallback_covers_all_operations_and_locales():
    for operation in Operation:
        for locale in Locale:
            assert get_operation_fallback(operation, locale)


def test_operation_fallback_without_operation_is_generic():
    assert get_operation_fallback(None, Locale.EN) == get_error_message("unexpected", Locale.EN)


def test_not_found_includes_resource():
    assert format_not_found("Conta", Locale.PT_BR).startswith("Conta não encontrado(a)")


def test_not_found_without_resource_uses_generic_noun():
    assert format_not_found(None, Locale.EN).startswith("Resource not found")
