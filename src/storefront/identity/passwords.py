"""Salted PBKDF2 password hashing.

Hashes are stored as ``pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>`` so
the iteration count can be raised later without invalidating old hashes.
"""

import hashlib
import hmac
import os
import secrets

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = int(os.getenv("PASSWORD_HASH_ITERATIONS", "100000"))
MIN_PASSWORD_LENGTH = 8


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def hash_password(password: str) -> str:
    salt = secrets.token_bytes(16)
    digest = _derive(password, salt, ITERATIONS)
    return f"{ALGORITHM}${ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str | None) -> bool:
    if not password or not encoded:
        return False

    try:
        algorithm, iterations, salt_hex, digest_hex = encoded.split("$")
    except ValueError:
        return False

    if algorithm != ALGORITHM:
        return False

    try:
        digest = _derive(password, bytes.fromhex(salt_hex), int(iterations))
    except ValueError:
        return False
    return hmac.compare_digest(digest.hex(), digest_hex)


def hash_token(token: str) -> str:
    """One-way digest for single-use tokens kept at rest."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
