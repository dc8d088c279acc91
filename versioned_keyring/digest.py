"""
Salted SHA1 digest used as a blind search index.

The digest does not depend on the encryption keys or algorithm, so equal
plaintexts under the same salt always produce equal digests, even across key
rotations. SHA1 is kept as the index format; it is a lookup fingerprint, not
an integrity check.
"""

from __future__ import annotations

import hashlib
from typing import Optional

from .errors import ConfigurationError, MissingSaltError, NonStringDigestInputError

DIGEST_SIZE: int = 40  # hex characters


def sha1_digest(value: str, salt: Optional[str]) -> str:
    """
    Return the lowercase hex SHA1 of `value + salt`.

    Args:
        value: Plaintext to fingerprint
        salt: Appended to value without separator; empty string is allowed

    Raises:
        MissingSaltError: If salt is None
        NonStringDigestInputError: If value is not a string
    """
    if salt is None:
        raise MissingSaltError()
    if not isinstance(salt, str):
        raise ConfigurationError(
            f"Digest salt must be a string (received {type(salt).__name__!r})"
        )
    if not isinstance(value, str):
        raise NonStringDigestInputError(value)

    return hashlib.sha1(f"{value}{salt}".encode("utf-8")).hexdigest()
