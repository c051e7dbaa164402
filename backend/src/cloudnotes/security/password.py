"""Password hashing utilities."""

from passlib.context import CryptContext

# pbkdf2_sha256 is pure Python inside passlib, so no native bcrypt build is needed.
# Hashes from older schemes listed here still verify and get upgraded on login.
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "sha256_crypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash; malformed hashes never verify."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def needs_update(hashed_password: str) -> bool:
    """Check if a stored hash should be replaced with a fresh one."""
    return pwd_context.needs_update(hashed_password)
