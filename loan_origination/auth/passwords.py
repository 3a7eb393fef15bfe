"""Password hashing for staff accounts."""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, stored: str) -> bool:
    """Check ``plain`` against a stored hash.

    A stored value passlib cannot identify never verifies.
    """
    try:
        return pwd_context.verify(plain, stored)
    except ValueError:
        return False


def needs_rehash(stored: str) -> bool:
    """True when ``stored`` uses deprecated settings and should be replaced."""
    return pwd_context.needs_update(stored)
