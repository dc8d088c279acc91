"""
Keyring Benchmark CLI.

Usage:
    keyring-benchmark

Or run directly:
    python -m versioned_keyring.benchmark

Settings (environment or .env file):
    KEYRING_BENCHMARK_ITERATIONS  Operations per measurement (default: 1000)
    KEYRING_SALT                  Digest salt (default: empty string)
"""

from __future__ import annotations

import os
import sys
import time
from typing import Dict, List, Tuple

from dotenv import load_dotenv

from versioned_keyring.config import KEY_SIZES
from versioned_keyring.crypto import generate_random_bytes
from versioned_keyring.errors import IntegrityError
from versioned_keyring.keyring import EncryptedValue, Keyring, keyring

DEFAULT_ITERATIONS = 1000
PLAINTEXT = "Sensitive data protected by keyring encryption"


def _box(title: str) -> None:
    print("+" + "-" * 68 + "+")
    print(f"|  {title}" + " " * max(0, 66 - len(title)) + "|")
    print("+" + "-" * 68 + "+")


def _rate(count: int, duration: float) -> str:
    return f"{count / duration:.2f}" if duration > 0 else "inf"


def _fresh_keyring(encryption: str, salt: str, key_ids: List[int]) -> Keyring:
    secret_size = KEY_SIZES[encryption] * 2
    keys = {str(key_id): generate_random_bytes(secret_size) for key_id in key_ids}
    return keyring(keys, salt=salt, encryption=encryption)


def _read_iterations() -> int:
    raw = os.environ.get("KEYRING_BENCHMARK_ITERATIONS", "").strip()
    try:
        iterations = int(raw) if raw else DEFAULT_ITERATIONS
    except ValueError:
        iterations = DEFAULT_ITERATIONS
    return max(1, iterations)


def run_benchmark() -> None:
    """Run the keyring benchmark for every supported algorithm."""
    print("=== Keyring Benchmark ===\n")

    # Load environment variables
    load_dotenv()

    iterations = _read_iterations()
    salt = os.environ.get("KEYRING_SALT", "")
    print(f"Testing with {iterations} operations per measurement\n")

    print("=" * 70)
    print("                    BENCHMARK START")
    print("=" * 70 + "\n")

    results: Dict[str, Tuple[float, float]] = {}

    for encryption in KEY_SIZES:
        # ====================================================================
        # Encryption/Decryption per algorithm
        # ====================================================================
        _box(f"{encryption}: Encryption/Decryption ({iterations} ops)")

        encryptor = _fresh_keyring(encryption, salt, [1])

        encrypt_start = time.perf_counter()
        values: List[EncryptedValue] = [
            encryptor.encrypt(PLAINTEXT) for _ in range(iterations)
        ]
        encrypt_duration = time.perf_counter() - encrypt_start

        decrypt_start = time.perf_counter()
        for value in values:
            if encryptor.decrypt(value.envelope, value.key_id) != PLAINTEXT:
                print(f"[ERROR] Round-trip mismatch for {encryption}")
                sys.exit(1)
        decrypt_duration = time.perf_counter() - decrypt_start

        results[encryption] = (encrypt_duration, decrypt_duration)

        print("[OK] Values encrypted/decrypted successfully")
        print(f"[PERF] Encryption: {encrypt_duration * 1000:.3f}ms ({_rate(iterations, encrypt_duration)} ops/sec)")
        print(f"[PERF] Decryption: {decrypt_duration * 1000:.3f}ms ({_rate(iterations, decrypt_duration)} ops/sec)\n")

    # ========================================================================
    # Digest
    # ========================================================================
    _box(f"Digest ({iterations} ops)")

    encryptor = _fresh_keyring(next(iter(KEY_SIZES)), salt, [1])
    digest_start = time.perf_counter()
    for i in range(iterations):
        encryptor.digest(f"{PLAINTEXT}-{i}")
    digest_duration = time.perf_counter() - digest_start

    print(f"[PERF] Digest: {digest_duration * 1000:.3f}ms ({_rate(iterations, digest_duration)} ops/sec)\n")

    # ========================================================================
    # Key rotation and backward compatibility
    # ========================================================================
    _box("Key Rotation + Backward Compatibility")

    encryption = next(iter(KEY_SIZES))
    old_keyring = _fresh_keyring(encryption, salt, [1])
    old_values = [old_keyring.encrypt(PLAINTEXT) for _ in range(iterations)]

    rotated = old_keyring.rotate(2, generate_random_bytes(KEY_SIZES[encryption] * 2))

    reencrypt_start = time.perf_counter()
    new_values = [rotated.reencrypt(v.envelope, v.key_id) for v in old_values]
    reencrypt_duration = time.perf_counter() - reencrypt_start

    print(f"[OK] Rotated key id {old_keyring.current_id()} -> {rotated.current_id()}")
    print(f"[OK] Re-encrypted {len(new_values)} values under key {new_values[0].key_id}")
    print(f"[PERF] Re-encryption: {reencrypt_duration * 1000:.3f}ms ({_rate(iterations, reencrypt_duration)} ops/sec)")

    tampered = bytearray(old_values[0].envelope.encode("ascii"))
    tampered[0] = ord("A") if tampered[0] != ord("A") else ord("B")
    try:
        rotated.decrypt(tampered.decode("ascii"), old_values[0].key_id)
        print("[ERROR] Tampered envelope was accepted\n")
    except IntegrityError:
        print("[OK] Tampered envelope rejected\n")

    # ========================================================================
    # Summary
    # ========================================================================
    print("=" * 70)
    print("                    BENCHMARK SUMMARY")
    print("=" * 70 + "\n")

    print("+- Performance Summary ----------------------------------------------+")
    print("|                                                                    |")
    for name, (encrypt_duration, decrypt_duration) in results.items():
        enc_rate = _rate(iterations, encrypt_duration)
        dec_rate = _rate(iterations, decrypt_duration)
        line = f"{name}  enc {enc_rate} ops/sec  dec {dec_rate} ops/sec"
        print(f"|  {line}" + " " * max(0, 66 - len(line)) + "|")
    print("|                                                                    |")
    print("+--------------------------------------------------------------------+")

    print("\nTest Configuration:")
    print(f"  - Operations per measurement: {iterations}")
    print("  - Crypto: AES-CBC + HMAC-SHA256 (encrypt-then-MAC)")
    print("  - Digest: SHA1(value || salt)")

    print("\n" + "=" * 70)
    print("                    BENCHMARK COMPLETE")
    print("=" * 70 + "\n")


def main() -> None:
    """CLI entry point for keyring-benchmark command."""
    run_benchmark()


if __name__ == "__main__":
    main()
