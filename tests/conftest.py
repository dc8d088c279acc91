"""
Pytest configuration and fixtures for keyring tests.
"""

from __future__ import annotations

import base64
from typing import Dict

import pytest

from versioned_keyring import Keyring, KeyringConfig, keyring

AES_128_SECRET = "uDiMcWVNTuz//naQ88sOcN+E40CyBRGzGTT7OkoBS6M="
AES_192_SECRET = "wtnnoK+5an+FPtxnkdUDrNw6fAq8yMkvCvzWpriLL9TQTR2WC/k+XPahYFPvCemG"
AES_256_SECRET = (
    "XZXC+c7VUVGpyAceSUCOBbrp2fjJeeHwoaMQefgSCfp0/HABY5yJ7zRiLZbDlDZ7HytCRsvP4CxXt5hUqtx9Uw=="
)

SECRETS: Dict[str, str] = {
    "aes-128-cbc": AES_128_SECRET,
    "aes-192-cbc": AES_192_SECRET,
    "aes-256-cbc": AES_256_SECRET,
}


def secret_for(encryption: str, fill: int) -> str:
    """Deterministic base64 secret of the right size for an algorithm."""
    size = len(base64.standard_b64decode(SECRETS[encryption]))
    return base64.standard_b64encode(bytes([fill]) * size).decode("ascii")


def flip_bit(envelope: str, index: int, bit: int = 0) -> str:
    """Return the envelope with one bit flipped at byte `index` of the decoded blob."""
    blob = bytearray(base64.standard_b64decode(envelope))
    blob[index] ^= 1 << bit
    return base64.standard_b64encode(bytes(blob)).decode("ascii")


@pytest.fixture(params=sorted(SECRETS))
def encryption(request) -> str:
    """Each supported algorithm name."""
    return request.param


@pytest.fixture
def keys_128() -> Dict[str, str]:
    return {"0": AES_128_SECRET}


@pytest.fixture
def config_128() -> KeyringConfig:
    return KeyringConfig(salt="", encryption="aes-128-cbc")


@pytest.fixture
def keyring_128(keys_128: Dict[str, str], config_128: KeyringConfig) -> Keyring:
    """Single-key aes-128-cbc keyring with an empty salt."""
    return Keyring(keys_128, config_128)


@pytest.fixture
def rotated_keyring(encryption: str) -> Keyring:
    """Keyring with ids 1 and 2 for the parametrized algorithm."""
    keys = {"1": secret_for(encryption, 1), "2": secret_for(encryption, 2)}
    return keyring(keys, salt="pepper", encryption=encryption)
