"""
Versioned Keyring

Versioned symmetric encryption for storing string values at rest, with a
salted digest for equality lookups over encrypted records.

Quick Start
-----------
```python
from versioned_keyring import keyring

keys = {
    "1": "uDiMcWVNTuz//naQ88sOcN+E40CyBRGzGTT7OkoBS6M=",
    "2": "VN14n31O/p3NXRpL0s26FjAoXqN3SM5c6hRqqA+WcqM=",
}
encryptor = keyring(keys, salt="salt-n-pepper")

encrypted, keyring_id, digest = encryptor.encrypt("TOP SECRET")   # keyring_id == 2
decrypted = encryptor.decrypt(encrypted, keyring_id)
```

Key Features
------------
- **AES-CBC + HMAC-SHA256**: Encrypt-then-MAC, verified before decryption
- **Key Versioning**: The highest id encrypts; every id in the map decrypts
- **Key Rotation**: Add a higher id and build a new keyring
- **Blind Index**: Salted SHA1 digest for searching without decrypting
- **Immutable**: A constructed keyring is safe to share between threads
"""

__version__ = "0.1.0"

# =============================================================================
# Configuration Exports
# =============================================================================

from .config import (
    AES_128_CBC,
    AES_192_CBC,
    AES_256_CBC,
    DEFAULT_ENCRYPTION,
    KEY_SIZES,
    KeyringConfig,
    load_keys_from_env,
)

# =============================================================================
# Crypto Exports
# =============================================================================

from .crypto import (
    HMAC_SIZE,
    IV_SIZE,
    AesCbcCipher,
    Envelope,
    HmacAuthenticator,
    generate_random_bytes,
    verify_signature,
)
from .digest import sha1_digest

# =============================================================================
# Error Exports
# =============================================================================

from .errors import (
    ConfigurationError,
    DecryptionError,
    DuplicateKeyIdError,
    EmptyKeyringError,
    InputTypeError,
    IntegrityError,
    InvalidKeyIdError,
    KeyLengthMismatchError,
    KeyMaterialError,
    KeyringError,
    MissingSaltError,
    NonStringDigestInputError,
    NonStringInputError,
    UnknownKeyIdError,
    UnsupportedAlgorithmError,
)

# =============================================================================
# Keyring Exports (Primary API)
# =============================================================================

from .keyring import EncryptedValue, Keyring, keyring
from .keys import KeyMaterial, KeyRegistry, normalize_keys

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Configuration
    "AES_128_CBC",
    "AES_192_CBC",
    "AES_256_CBC",
    "DEFAULT_ENCRYPTION",
    "KEY_SIZES",
    "KeyringConfig",
    "load_keys_from_env",
    # Crypto
    "HMAC_SIZE",
    "IV_SIZE",
    "AesCbcCipher",
    "Envelope",
    "HmacAuthenticator",
    "generate_random_bytes",
    "verify_signature",
    "sha1_digest",
    # Errors
    "KeyringError",
    "ConfigurationError",
    "MissingSaltError",
    "UnsupportedAlgorithmError",
    "KeyMaterialError",
    "KeyLengthMismatchError",
    "InvalidKeyIdError",
    "DuplicateKeyIdError",
    "EmptyKeyringError",
    "UnknownKeyIdError",
    "IntegrityError",
    "InputTypeError",
    "NonStringInputError",
    "NonStringDigestInputError",
    "DecryptionError",
    # Keyring (Primary API)
    "Keyring",
    "EncryptedValue",
    "keyring",
    "KeyMaterial",
    "KeyRegistry",
    "normalize_keys",
]
