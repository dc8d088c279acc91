"""
Versioned key material.

This module provides:
- KeyMaterial: One versioned key split into signing and encryption sub-keys
- normalize_keys: Validate a raw {id: secret} map into KeyMaterial records
- KeyRegistry: Immutable, id-ordered collection resolving current and by-id keys
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Tuple, Union

from .errors import (
    DuplicateKeyIdError,
    EmptyKeyringError,
    InvalidKeyIdError,
    KeyLengthMismatchError,
    KeyMaterialError,
    UnknownKeyIdError,
)

Secret = Union[str, bytes, bytearray, memoryview]
KeyId = Union[int, str]

_KEY_ID_PATTERN = re.compile(r"\d+")


@dataclass(frozen=True, repr=False)
class KeyMaterial:
    """
    A single versioned key.

    The raw secret is split in half: the first half signs (HMAC-SHA256), the
    second half encrypts (AES-CBC).
    """

    id: int
    encryption_key: bytes
    signing_key: bytes

    @classmethod
    def from_secret(cls, key_id: int, secret: bytes, key_size: int) -> KeyMaterial:
        """
        Split a raw secret of exactly 2 * key_size bytes.

        Raises:
            KeyLengthMismatchError: If the secret has the wrong length
        """
        expected = key_size * 2
        if len(secret) != expected:
            raise KeyLengthMismatchError(key_id, expected, len(secret))
        return cls(
            id=key_id,
            encryption_key=bytes(secret[key_size:expected]),
            signing_key=bytes(secret[:key_size]),
        )

    def __repr__(self) -> str:
        """Redacted representation to prevent accidental key disclosure."""
        return f"KeyMaterial(id={self.id}, [REDACTED])"


def parse_key_id(key_id: object) -> int:
    """
    Parse a key id given as an int or a string of decimal digits.

    Raises:
        InvalidKeyIdError: If the id is not a non-negative integer
    """
    if isinstance(key_id, bool):
        raise InvalidKeyIdError(key_id)
    if isinstance(key_id, int):
        if key_id < 0:
            raise InvalidKeyIdError(key_id)
        return key_id
    if isinstance(key_id, str) and _KEY_ID_PATTERN.fullmatch(key_id.strip()):
        return int(key_id.strip())
    raise InvalidKeyIdError(key_id)


def decode_secret(key_id: object, secret: Secret) -> bytes:
    """
    Return raw secret bytes. Strings are assumed to be base64-encoded.

    Raises:
        KeyMaterialError: If the secret is neither bytes nor valid base64
    """
    if isinstance(secret, (bytes, bytearray, memoryview)):
        return bytes(secret)
    if isinstance(secret, str):
        try:
            return base64.standard_b64decode(secret)
        except (binascii.Error, ValueError) as e:
            raise KeyMaterialError(f"key={key_id} is not valid base64: {e}")
    raise KeyMaterialError(
        f"key={key_id} must be a base64 string or bytes "
        f"(received {type(secret).__name__!r})"
    )


def normalize_keys(keys: Mapping[KeyId, Secret], key_size: int) -> List[KeyMaterial]:
    """
    Convert a raw {id: secret} map into KeyMaterial records.

    Each secret is checked for length before its id is parsed.

    Args:
        keys: Mapping of key id to base64 string or raw bytes
        key_size: Sub-key size for the selected algorithm

    Returns:
        List of KeyMaterial in mapping order

    Raises:
        KeyLengthMismatchError: If a decoded secret is not 2 * key_size bytes
        InvalidKeyIdError: If an id is not a non-negative integer
        DuplicateKeyIdError: If two ids parse to the same integer
    """
    materials: List[KeyMaterial] = []
    seen = set()

    for raw_id, secret in keys.items():
        decoded = decode_secret(raw_id, secret)
        expected = key_size * 2
        if len(decoded) != expected:
            raise KeyLengthMismatchError(raw_id, expected, len(decoded))

        key_id = parse_key_id(raw_id)
        if key_id in seen:
            raise DuplicateKeyIdError(key_id)
        seen.add(key_id)

        materials.append(KeyMaterial.from_secret(key_id, decoded, key_size))

    return materials


class KeyRegistry:
    """
    Immutable set of versioned keys ordered by id.

    The current key is the one with the largest id; it encrypts all new
    values. Older keys stay available for decryption.
    """

    __slots__ = ("_keys", "_by_id")

    def __init__(self, keys: List[KeyMaterial]) -> None:
        """
        Args:
            keys: KeyMaterial records with unique ids (any order)

        Raises:
            EmptyKeyringError: If no keys are given
            DuplicateKeyIdError: If two records share an id
        """
        if not keys:
            raise EmptyKeyringError()

        by_id: Dict[int, KeyMaterial] = {}
        for key in keys:
            if key.id in by_id:
                raise DuplicateKeyIdError(key.id)
            by_id[key.id] = key

        self._keys: Tuple[KeyMaterial, ...] = tuple(sorted(keys, key=lambda k: k.id))
        self._by_id = by_id

    @classmethod
    def from_mapping(cls, keys: Mapping[KeyId, Secret], key_size: int) -> KeyRegistry:
        """Validate a raw {id: secret} map and build a registry from it."""
        return cls(normalize_keys(keys, key_size))

    def current(self) -> KeyMaterial:
        """Return the key with the largest id."""
        return self._keys[-1]

    def find(self, key_id: object) -> KeyMaterial:
        """
        Find a key by its id.

        Args:
            key_id: Integer id or string of decimal digits

        Raises:
            UnknownKeyIdError: If no key matches
        """
        try:
            parsed = parse_key_id(key_id)
        except InvalidKeyIdError:
            raise UnknownKeyIdError(key_id)

        key = self._by_id.get(parsed)
        if key is None:
            raise UnknownKeyIdError(key_id)
        return key

    @property
    def ids(self) -> Tuple[int, ...]:
        """Key ids in ascending order."""
        return tuple(key.id for key in self._keys)

    def __contains__(self, key_id: object) -> bool:
        try:
            self.find(key_id)
        except UnknownKeyIdError:
            return False
        return True

    def __iter__(self) -> Iterator[KeyMaterial]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"KeyRegistry(ids={list(self.ids)})"
