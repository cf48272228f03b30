"""Password hashing utilities.

Passwords are never stored as given. Each one is hashed with PBKDF2-HMAC-SHA256
under a random salt, and the algorithm, iteration count, salt and digest are
encoded together so the stored value is self-describing:

    pbkdf2_sha256$200000$<salt>$<digest>

Salt and digest are unpadded URL-safe base64.
"""

import base64
import binascii
import hashlib
import hmac
import os

HASH_ALGORITHM = "sha256"
DEFAULT_ITERATIONS = 200_000
SALT_BYTES = 16
SCHEME_PREFIX = "pbkdf2_"


def hash_password(password: str, iterations: int = DEFAULT_ITERATIONS) -> str:
    """Hash a password with a fresh random salt.

    Args:
        password: Plain-text password
        iterations: PBKDF2 iteration count

    Returns:
        Encoded hash string suitable for storage

    Example:
        >>> encoded = hash_password("secret1")
        >>> encoded.startswith("pbkdf2_sha256$200000$")
        True
    """
    salt = os.urandom(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac(HASH_ALGORITHM, password.encode("utf-8"), salt, iterations)
    return "$".join(
        [
            f"{SCHEME_PREFIX}{HASH_ALGORITHM}",
            str(iterations),
            _b64encode(salt),
            _b64encode(digest),
        ]
    )


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against a stored hash in constant time.

    Malformed or unsupported hashes never verify.

    Args:
        password: Plain-text password to check
        encoded: Value previously produced by hash_password()

    Returns:
        True if the password matches, False otherwise
    """
    try:
        scheme, iterations_str, salt_b64, digest_b64 = encoded.split("$", 3)
        if not scheme.startswith(SCHEME_PREFIX):
            return False
        algorithm = scheme[len(SCHEME_PREFIX):]
        iterations = int(iterations_str)
        salt = _b64decode(salt_b64)
        expected = _b64decode(digest_b64)
        actual = hashlib.pbkdf2_hmac(algorithm, password.encode("utf-8"), salt, iterations)
    except (AttributeError, ValueError, binascii.Error):
        return False

    return hmac.compare_digest(actual, expected)


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode((data + padding).encode("ascii"))
