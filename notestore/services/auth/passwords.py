"""
Password hashing: salted PBKDF2-SHA256, stored as "pbkdf2_sha256$<iterations>$<salt>$<hex digest>".
Legacy documents may carry plaintext credentials; they still verify and get re-hashed on login.
"""
import hashlib
import hmac
import secrets

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 260_000


def hash_password(password: str, *, iterations: int = ITERATIONS) -> str:
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), iterations)
    return f"{ALGORITHM}${iterations}${salt}${digest.hex()}"


def is_hashed(stored: str) -> bool:
    return stored.startswith(f"{ALGORITHM}$")


def verify_password(password: str, stored: str) -> bool:
    if not stored:
        return False
    if not is_hashed(stored):
        return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))
    try:
        _, iterations, salt, expected = stored.split("$", 3)
        digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("ascii"), int(iterations))
    except ValueError:
        return False
    return hmac.compare_digest(digest.hex(), expected)
