"""Staff authentication and user management."""

from loan_origination.auth.passwords import hash_password, verify_password
from loan_origination.auth.users import DEFAULT_USERS, UserService

__all__ = ["DEFAULT_USERS", "UserService", "hash_password", "verify_password"]
