"""
Keyring: versioned symmetric encryption with a blind search digest.

Quick Start
-----------
```python
from versioned_keyring import keyring

keys = {"1": "uDiMcWVNTuz//naQ88sOcN+E40CyBRGzGTT7OkoBS6M="}
encryptor = keyring(keys, salt="salt-n-pepper")

# Encrypt using the current (highest id) key
encrypted, keyring_id, digest = encryptor.encrypt("TOP SECRET")

# Decrypt using the key the value was encrypted with
decrypted = encryptor.decrypt(encrypted, keyring_id)
```

A Keyring never changes after construction and is safe to share between
threads. Rotating keys means building a new Keyring from a key map that
contains a higher id; values encrypted under older ids stay decryptable as
long as their key is still in the map.
"""

from __future__ import annotations

import logging
from typing import Mapping, NamedTuple, Optional, Tuple, Union

from .config import DEFAULT_ENCRYPTION, KeyringConfig
from .crypto import AesCbcCipher, Envelope, HmacAuthenticator
from .digest import sha1_digest
from .errors import (
    ConfigurationError,
    DecryptionError,
    IntegrityError,
    KeyLengthMismatchError,
    NonStringInputError,
)
from .keys import KeyId, KeyMaterial, KeyRegistry, Secret, normalize_keys

logger = logging.getLogger(__name__)

ConfigLike = Union[KeyringConfig, Mapping[str, Optional[str]], None]


class EncryptedValue(NamedTuple):
    """Result of Keyring.encrypt. Unpacks as (envelope, key_id, digest)."""

    envelope: str
    key_id: int
    digest: str


def _coerce_config(config: ConfigLike) -> KeyringConfig:
    if isinstance(config, KeyringConfig):
        return config
    if config is None:
        return KeyringConfig()
    if isinstance(config, Mapping):
        return KeyringConfig(
            salt=config.get("salt"),
            encryption=config.get("encryption") or DEFAULT_ENCRYPTION,
        )
    raise ConfigurationError(
        f"Keyring options must be a KeyringConfig or mapping "
        f"(received {type(config).__name__!r})"
    )


class Keyring:
    """
    Immutable set of versioned keys with encrypt/decrypt/digest operations.

    Construction validates everything up front; a Keyring that was built is
    fully usable.
    """

    __slots__ = ("_config", "_registry", "_cipher")

    def __init__(self, keys: Mapping[KeyId, Secret], config: ConfigLike = None) -> None:
        """
        Build a keyring from a raw {id: secret} map.

        Args:
            keys: Key id (int or digit string) to base64 string or raw bytes
            config: KeyringConfig or a mapping with `salt` and `encryption`

        Raises:
            MissingSaltError: If no salt is configured
            UnsupportedAlgorithmError: If the algorithm is not supported
            KeyLengthMismatchError: If a secret has the wrong size
            InvalidKeyIdError: If a key id is not an integer
            EmptyKeyringError: If no keys are given
        """
        resolved = _coerce_config(config)
        self._setup(KeyRegistry.from_mapping(keys, resolved.key_size), resolved)

    @classmethod
    def from_registry(cls, registry: KeyRegistry, config: ConfigLike) -> Keyring:
        """
        Build a keyring from already validated key material.

        Raises:
            KeyLengthMismatchError: If a key does not fit the configured algorithm
        """
        resolved = _coerce_config(config)
        for key in registry:
            if (
                len(key.encryption_key) != resolved.key_size
                or len(key.signing_key) != resolved.key_size
            ):
                raise KeyLengthMismatchError(
                    key.id,
                    resolved.secret_size,
                    len(key.encryption_key) + len(key.signing_key),
                )

        instance = cls.__new__(cls)
        instance._setup(registry, resolved)
        return instance

    def _setup(self, registry: KeyRegistry, config: KeyringConfig) -> None:
        self._config = config
        self._registry = registry
        self._cipher = AesCbcCipher(config.encryption)
        logger.debug(
            "Keyring initialized: encryption=%s key_ids=%s current_id=%d",
            config.encryption,
            list(registry.ids),
            registry.current().id,
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def config(self) -> KeyringConfig:
        """Configuration this keyring was built with."""
        return self._config

    @property
    def registry(self) -> KeyRegistry:
        return self._registry

    @property
    def key_ids(self) -> Tuple[int, ...]:
        """All key ids in ascending order."""
        return self._registry.ids

    def current_id(self) -> int:
        """Return the id of the key used for new encryptions."""
        return self._registry.current().id

    # =========================================================================
    # Operations
    # =========================================================================

    def encrypt(self, plaintext: str) -> EncryptedValue:
        """
        Encrypt a string with the current key.

        Args:
            plaintext: Value to encrypt

        Returns:
            EncryptedValue(envelope, key_id, digest)

        Raises:
            NonStringInputError: If plaintext is not a string
        """
        if not isinstance(plaintext, str):
            raise NonStringInputError(plaintext)

        key = self._registry.current()
        iv, ciphertext = self._cipher.encrypt(key, plaintext.encode("utf-8"))
        mac = HmacAuthenticator.sign(key.signing_key, iv + ciphertext)

        envelope = Envelope(mac=mac, iv=iv, ciphertext=ciphertext)
        return EncryptedValue(
            envelope=envelope.to_base64(),
            key_id=key.id,
            digest=self.digest(plaintext),
        )

    def decrypt(self, envelope: str, key_id: KeyId) -> str:
        """
        Verify and decrypt an envelope produced by encrypt().

        The HMAC is checked before anything is decrypted.

        Args:
            envelope: Base64 envelope string
            key_id: Id of the key the envelope was encrypted with

        Returns:
            Decrypted string

        Raises:
            UnknownKeyIdError: If key_id is not on this keyring
            IntegrityError: If the HMAC does not match
            DecryptionError: If the envelope is malformed or cannot be decrypted
        """
        key = self._registry.find(key_id)
        parsed = Envelope.from_base64(envelope)
        self._verify(key, parsed)

        plaintext = self._cipher.decrypt(key, parsed.iv, parsed.ciphertext)
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError:
            raise DecryptionError("Decrypted value is not valid UTF-8")

    def digest(self, plaintext: str) -> str:
        """Return the salted SHA1 hex digest of plaintext."""
        return sha1_digest(plaintext, self._config.salt)

    def reencrypt(self, envelope: str, key_id: KeyId) -> EncryptedValue:
        """
        Move a value encrypted under key_id to the current key.

        Raises:
            UnknownKeyIdError: If key_id is not on this keyring
            IntegrityError: If the HMAC does not match
            DecryptionError: If the envelope cannot be decrypted
        """
        return self.encrypt(self.decrypt(envelope, key_id))

    def rotate(self, key_id: KeyId, secret: Secret) -> Keyring:
        """
        Return a new keyring with an additional key; this one is unchanged.

        Raises:
            KeyLengthMismatchError: If the secret has the wrong size
            InvalidKeyIdError: If key_id is not an integer
            DuplicateKeyIdError: If key_id is already on the keyring
        """
        added = normalize_keys({key_id: secret}, self._config.key_size)
        registry = KeyRegistry(list(self._registry) + added)
        logger.debug(
            "Keyring rotated: current_id %d -> %d",
            self.current_id(),
            registry.current().id,
        )
        return Keyring.from_registry(registry, self._config)

    def _verify(self, key: KeyMaterial, envelope: Envelope) -> None:
        expected = HmacAuthenticator.sign(key.signing_key, envelope.signed_data)
        if not HmacAuthenticator.verify(expected, envelope.mac):
            logger.warning("HMAC verification failed for key=%d", key.id)
            raise IntegrityError(
                f"HMAC verification failed for key={key.id}; "
                "the value was tampered with or encrypted with another key"
            )

    def __repr__(self) -> str:
        return (
            f"Keyring(encryption={self._config.encryption!r}, "
            f"key_ids={list(self.key_ids)})"
        )


def keyring(
    keys: Mapping[KeyId, Secret],
    salt: Optional[str] = None,
    encryption: str = DEFAULT_ENCRYPTION,
) -> Keyring:
    """
    Create a keyring.

    Args:
        keys: Key id to base64 secret (or raw bytes); each secret holds the
            signing key followed by the encryption key
        salt: Appended to values before digesting; required, may be empty
        encryption: `aes-128-cbc`, `aes-192-cbc` or `aes-256-cbc`

    Returns:
        Keyring instance
    """
    return Keyring(keys, KeyringConfig(salt=salt, encryption=encryption))
