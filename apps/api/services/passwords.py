"""
Password hashing with PBKDF2-HMAC-SHA256.

Stored format: ``pbkdf2_sha256$<iterations>$<salt_b64>$<hash_b64>``.
"""

import base64
import hmac
import os

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from config import settings


HASH_ALGORITHM = "pbkdf2_sha256"
SALT_BYTES = 16
KEY_LENGTH = 32


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


def hash_password(password: str, iterations: int | None = None) -> str:
    """Hash a plain text password for storage."""
    rounds = int(iterations or settings.PASSWORD_HASH_ITERATIONS)
    salt = os.urandom(SALT_BYTES)
    digest = _derive(password, salt, rounds)
    return "$".join([
        HASH_ALGORITHM,
        str(rounds),
        base64.b64encode(salt).decode("ascii"),
        base64.b64encode(digest).decode("ascii"),
    ])


def verify_password(password: str, stored_hash: str | None) -> bool:
    """Check a password against a stored hash. Malformed hashes never match."""
    if not password or not stored_hash:
        return False
    parts = stored_hash.split("$")
    if len(parts) != 4 or parts[0] != HASH_ALGORITHM:
        return False
    try:
        rounds = int(parts[1])
        salt = base64.b64decode(parts[2])
        expected = base64.b64decode(parts[3])
    except ValueError:
        return False
    if rounds <= 0:
        return False
    return hmac.compare_digest(_derive(password, salt, rounds), expected)
