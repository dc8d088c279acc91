"""
Exception classes for keyring operations.

Every failure raised by this package derives from KeyringError, grouped by the
stage that detects it: configuration, key material, lookup, integrity, input
type and decryption.
"""

from __future__ import annotations


class KeyringError(Exception):
    """Base exception for all keyring operations."""

    pass


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(KeyringError):
    """Keyring configuration is invalid."""

    pass


class MissingSaltError(ConfigurationError):
    """Digest salt was not provided."""

    def __init__(self) -> None:
        super().__init__(
            "Digest salt is required; pass an empty string to use no salt"
        )


class UnsupportedAlgorithmError(ConfigurationError):
    """Encryption algorithm is not recognized or unsupported."""

    def __init__(self, algorithm: object) -> None:
        self.algorithm = algorithm
        super().__init__(
            f"Encryption algorithm not recognized or unsupported: {algorithm!r}"
        )


# =============================================================================
# Key material
# =============================================================================


class KeyMaterialError(KeyringError):
    """Key material supplied at construction is invalid."""

    pass


class KeyLengthMismatchError(KeyMaterialError):
    """Decoded secret does not have the length the algorithm requires."""

    def __init__(self, key_id: object, expected: int, actual: int) -> None:
        self.key_id = key_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected key={key_id} to be {expected} bytes long; got {actual} instead"
        )


class InvalidKeyIdError(KeyMaterialError):
    """Key id is not a non-negative integer."""

    def __init__(self, key_id: object) -> None:
        self.key_id = key_id
        super().__init__(f"All keyring keys must be integer numbers; got {key_id!r}")


class DuplicateKeyIdError(KeyMaterialError):
    """Two keys resolve to the same integer id."""

    def __init__(self, key_id: int) -> None:
        self.key_id = key_id
        super().__init__(f"key={key_id} is defined more than once")


class EmptyKeyringError(KeyMaterialError):
    """Keyring was initialized without keys."""

    def __init__(self) -> None:
        super().__init__("You must initialize the keyring with at least one key")


# =============================================================================
# Runtime failures
# =============================================================================


class UnknownKeyIdError(KeyringError, LookupError):
    """Key id is not available on the keyring."""

    def __init__(self, key_id: object) -> None:
        self.key_id = key_id
        super().__init__(f"key={key_id} is not available on keyring")


class IntegrityError(KeyringError):
    """HMAC verification failed; the envelope was tampered with or corrupted."""

    pass


class InputTypeError(KeyringError, TypeError):
    """A value of the wrong type was passed to encrypt or digest."""

    pass


class NonStringInputError(InputTypeError):
    """encrypt() received a non-string value."""

    def __init__(self, value: object) -> None:
        super().__init__(
            f"You can only encrypt strings (received {type(value).__name__!r} instead)"
        )


class NonStringDigestInputError(InputTypeError):
    """digest() received a non-string value."""

    def __init__(self, value: object) -> None:
        super().__init__(
            "You can only generate SHA1 digests from strings "
            f"(received {type(value).__name__!r} instead)"
        )


class DecryptionError(KeyringError):
    """Envelope is malformed or the cipher could not decrypt it."""

    pass
