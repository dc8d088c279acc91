"""
Cryptographic primitives for the keyring envelope.

This module provides:
- AesCbcCipher: AES-CBC encryption/decryption with PKCS7 padding
- HmacAuthenticator: HMAC-SHA256 signing and constant-time verification
- Envelope: Encrypted payload with HMAC, IV and ciphertext
- verify_signature: Constant-time byte comparison

Wire format (base64): hmac(32) || iv(16) || ciphertext
"""

from __future__ import annotations

import base64
import binascii
import secrets
from dataclasses import dataclass
from typing import Tuple

from cryptography.hazmat.primitives import hashes, hmac, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .config import KEY_SIZES
from .errors import DecryptionError, UnsupportedAlgorithmError
from .keys import KeyMaterial

# Cryptographic constants
HMAC_SIZE: int = 32  # HMAC-SHA256 output
IV_SIZE: int = 16  # AES block size
BLOCK_SIZE_BITS: int = 128
MIN_ENVELOPE_SIZE: int = HMAC_SIZE + IV_SIZE


def verify_signature(expected: bytes, actual: bytes) -> bool:
    """
    Compare two MACs in constant time.

    Every byte pair is visited regardless of where the first difference
    occurs. Only a length mismatch returns early.
    """
    if len(expected) != len(actual):
        return False

    acc = 0
    for x, y in zip(expected, actual):
        acc |= x ^ y
    return acc == 0


@dataclass(frozen=True)
class Envelope:
    """
    Encrypted value as stored on the wire.

    The HMAC covers iv || ciphertext (encrypt-then-MAC).
    """

    mac: bytes  # HMAC-SHA256, 32 bytes
    iv: bytes  # 16 bytes
    ciphertext: bytes  # PKCS7-padded, multiple of 16 bytes

    @property
    def signed_data(self) -> bytes:
        """Bytes covered by the HMAC."""
        return self.iv + self.ciphertext

    def to_bytes(self) -> bytes:
        """Concatenate as hmac || iv || ciphertext."""
        return self.mac + self.iv + self.ciphertext

    @classmethod
    def from_bytes(cls, blob: bytes) -> Envelope:
        """
        Split hmac || iv || ciphertext.

        Raises:
            DecryptionError: If the blob is too small to hold hmac and iv
        """
        if len(blob) < MIN_ENVELOPE_SIZE:
            raise DecryptionError(
                f"Envelope too small: expected at least {MIN_ENVELOPE_SIZE} bytes, "
                f"got {len(blob)}"
            )
        return cls(
            mac=bytes(blob[:HMAC_SIZE]),
            iv=bytes(blob[HMAC_SIZE:MIN_ENVELOPE_SIZE]),
            ciphertext=bytes(blob[MIN_ENVELOPE_SIZE:]),
        )

    def to_base64(self) -> str:
        """Encode as base64 string."""
        return base64.standard_b64encode(self.to_bytes()).decode("ascii")

    @classmethod
    def from_base64(cls, encoded: str) -> Envelope:
        """
        Decode from base64 string.

        Raises:
            DecryptionError: If decoding fails or the envelope is too small
        """
        try:
            decoded = base64.standard_b64decode(encoded)
        except (binascii.Error, ValueError, TypeError) as e:
            raise DecryptionError(f"Base64 decode error: {e}")
        return cls.from_bytes(decoded)


class AesCbcCipher:
    """
    AES in CBC mode with PKCS7 padding.

    The algorithm name only selects the key size; all three variants share
    the same block size and padding.
    """

    __slots__ = ("_algorithm", "_key_size")

    def __init__(self, algorithm: str) -> None:
        if algorithm not in KEY_SIZES:
            raise UnsupportedAlgorithmError(algorithm)
        self._algorithm = algorithm
        self._key_size = KEY_SIZES[algorithm]

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def key_size(self) -> int:
        return self._key_size

    def _cipher(self, key: KeyMaterial, iv: bytes) -> Cipher:
        if len(key.encryption_key) != self._key_size:
            raise DecryptionError(
                f"Invalid key size for {self._algorithm}: "
                f"expected {self._key_size}, got {len(key.encryption_key)}"
            )
        return Cipher(algorithms.AES(key.encryption_key), modes.CBC(iv))

    def encrypt(self, key: KeyMaterial, plaintext: bytes) -> Tuple[bytes, bytes]:
        """
        Encrypt plaintext under a fresh random IV.

        Returns:
            (iv, ciphertext)
        """
        iv = generate_random_bytes(IV_SIZE)

        padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext) + padder.finalize()

        encryptor = self._cipher(key, iv).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return iv, ciphertext

    def decrypt(self, key: KeyMaterial, iv: bytes, ciphertext: bytes) -> bytes:
        """
        Decrypt and unpad ciphertext.

        Raises:
            DecryptionError: If the IV, block length or padding is invalid
        """
        if len(iv) != IV_SIZE:
            raise DecryptionError(
                f"Invalid IV size: expected {IV_SIZE}, got {len(iv)}"
            )

        try:
            decryptor = self._cipher(key, iv).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()

            unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError:
            # Generic error to prevent padding oracle attacks
            raise DecryptionError("Decryption failed")


class HmacAuthenticator:
    """HMAC-SHA256 over iv || ciphertext."""

    @staticmethod
    def sign(signing_key: bytes, data: bytes) -> bytes:
        """Return the 32-byte HMAC-SHA256 tag for data."""
        h = hmac.HMAC(signing_key, hashes.SHA256())
        h.update(data)
        return h.finalize()

    @staticmethod
    def verify(expected: bytes, actual: bytes) -> bool:
        """Constant-time tag comparison."""
        return verify_signature(expected, actual)


def generate_random_bytes(length: int) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Args:
        length: Number of bytes to generate

    Returns:
        Random bytes of specified length
    """
    return secrets.token_bytes(length)
