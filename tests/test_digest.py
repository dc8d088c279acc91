"""
Tests for the salted SHA1 digest.
"""

from __future__ import annotations

import hashlib

import pytest

from versioned_keyring import (
    ConfigurationError,
    InputTypeError,
    MissingSaltError,
    NonStringDigestInputError,
    sha1_digest,
)


def test_known_vector():
    assert sha1_digest("42", "a") == "118c884d37dde5fb6816daba052d94e82f1dc41f"


def test_concatenates_value_and_salt():
    assert sha1_digest("42", "a") == sha1_digest("42a", "")
    assert sha1_digest("42", "") == hashlib.sha1(b"42").hexdigest()


def test_lowercase_hex_40_chars():
    digest = sha1_digest("Sensitive data", "pepper")

    assert len(digest) == 40
    assert digest == digest.lower()
    int(digest, 16)


def test_deterministic():
    assert sha1_digest("value", "salt") == sha1_digest("value", "salt")


def test_varies_with_salt():
    assert sha1_digest("value", "salt") != sha1_digest("value", "pepper")


def test_unicode_is_utf8_encoded():
    assert sha1_digest("café", "") == hashlib.sha1("café".encode("utf-8")).hexdigest()


def test_missing_salt():
    with pytest.raises(MissingSaltError):
        sha1_digest("42", None)


def test_non_string_salt():
    with pytest.raises(ConfigurationError):
        sha1_digest("42", 1)


@pytest.mark.parametrize("value", [42, None, b"42", ["4", "2"]])
def test_non_string_value(value):
    with pytest.raises(NonStringDigestInputError, match="strings"):
        sha1_digest(value, "")


def test_non_string_value_is_type_error():
    with pytest.raises(TypeError):
        sha1_digest(42, "")

    with pytest.raises(InputTypeError):
        sha1_digest(42, "")
