"""
Keyring configuration.

This module provides:
- KeyringConfig: Immutable algorithm + digest salt settings for one Keyring
- KEY_SIZES: Sub-key size (bytes) per supported algorithm
- load_keys_from_env: Read a raw {id: base64 secret} map from the environment
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .errors import ConfigurationError, MissingSaltError, UnsupportedAlgorithmError

# Supported algorithms. Each raw secret is twice the sub-key size because
# half of it is used as the HMAC key.
AES_128_CBC: str = "aes-128-cbc"
AES_192_CBC: str = "aes-192-cbc"
AES_256_CBC: str = "aes-256-cbc"

KEY_SIZES: Dict[str, int] = {
    AES_128_CBC: 16,
    AES_192_CBC: 24,
    AES_256_CBC: 32,
}

DEFAULT_ENCRYPTION: str = AES_128_CBC

# Environment variable names
ENV_ENCRYPTION: str = "KEYRING_ENCRYPTION"
ENV_SALT: str = "KEYRING_SALT"
ENV_KEYS: str = "KEYRING_KEYS"


@dataclass(frozen=True)
class KeyringConfig:
    """
    Settings for a Keyring instance.

    `salt` is required but may be empty; it is appended to every value before
    the SHA1 digest is computed. `encryption` selects the AES key size; the
    mode is always CBC.
    """

    salt: Optional[str] = None
    encryption: str = DEFAULT_ENCRYPTION

    def __post_init__(self) -> None:
        if self.salt is None:
            raise MissingSaltError()
        if not isinstance(self.salt, str):
            raise ConfigurationError(
                f"Digest salt must be a string (received {type(self.salt).__name__!r})"
            )
        if self.encryption not in KEY_SIZES:
            raise UnsupportedAlgorithmError(self.encryption)

    @property
    def key_size(self) -> int:
        """Size in bytes of each sub-key (encryption and signing)."""
        return KEY_SIZES[self.encryption]

    @property
    def secret_size(self) -> int:
        """Size in bytes of a raw secret (signing key + encryption key)."""
        return self.key_size * 2

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> KeyringConfig:
        """
        Build a config from KEYRING_SALT and KEYRING_ENCRYPTION.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            KeyringConfig instance

        Raises:
            MissingSaltError: If KEYRING_SALT is not set
            UnsupportedAlgorithmError: If KEYRING_ENCRYPTION is not supported
        """
        env = os.environ if environ is None else environ
        return cls(
            salt=env.get(ENV_SALT),
            encryption=env.get(ENV_ENCRYPTION) or DEFAULT_ENCRYPTION,
        )


def load_keys_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Read the raw key map from KEYRING_KEYS.

    The variable holds a JSON object mapping key ids to base64 secrets, e.g.
    `{"1": "uDiMcWVN...", "2": "XZXC+c7V..."}`.

    Raises:
        ConfigurationError: If the variable is missing or not a JSON object
    """
    env = os.environ if environ is None else environ
    raw = env.get(ENV_KEYS)
    if raw is None:
        raise ConfigurationError(f"{ENV_KEYS} must be set in environment or .env file")

    try:
        keys = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{ENV_KEYS} is not valid JSON: {e}")

    if not isinstance(keys, dict):
        raise ConfigurationError(f"{ENV_KEYS} must be a JSON object of id -> secret")

    return {str(key_id): secret for key_id, secret in keys.items()}
