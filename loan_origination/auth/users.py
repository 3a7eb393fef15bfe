"""Staff user management, login and session tracking."""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable

from loan_origination.access import permissions_for_role, require_permission
from loan_origination.auth.passwords import hash_password, needs_rehash, verify_password
from loan_origination.exceptions import (
    AuthenticationError,
    CorruptRecordError,
    DuplicateEntityError,
    EntityNotFoundError,
    ValidationError,
)
from loan_origination.models import Action, AuthSession, Resource, User, UserRole
from loan_origination.store.repository import LoanOriginationRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

# (id, username, password, full name, email, role)
DEFAULT_USERS = [
    ("1", "admin", "admin123", "Administrador Principal", "admin@prestamos.com", UserRole.ADMIN),
    ("2", "manager", "manager123", "Gerente de Préstamos", "gerente@prestamos.com", UserRole.MANAGER),
    ("3", "agent", "agent123", "Agente de Préstamos", "agente@prestamos.com", UserRole.AGENT),
]

UPDATABLE_FIELDS = {"username", "full_name", "email", "role", "active", "password"}


class UserService:
    """Users and the single login session kept in the record store."""

    def __init__(
        self,
        repository: LoanOriginationRepository,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repository = repository
        self.clock = clock

    def initialize_users(self) -> None:
        """Seed the default admin, manager and agent accounts if none exist."""
        if self.repository.load_users():
            return
        now = self.clock()
        users = [
            User(
                id=user_id,
                username=username,
                password_hash=hash_password(password),
                full_name=full_name,
                email=email,
                role=role,
                active=True,
                created_at=now,
            )
            for user_id, username, password, full_name, email, role in DEFAULT_USERS
        ]
        self.repository.save_users(users)
        logger.info("Seeded %d default users", len(users))

    def list_users(self, session: AuthSession) -> list[User]:
        require_permission(session.permissions, Resource.USERS, Action.READ)
        return self.repository.load_users()

    def get_user(self, user_id: str) -> User | None:
        return next((u for u in self.repository.load_users() if u.id == user_id), None)

    def get_user_by_username(self, username: str) -> User | None:
        return next((u for u in self.repository.load_users() if u.username == username), None)

    def create_user(
        self,
        session: AuthSession,
        username: str,
        password: str,
        full_name: str,
        email: str,
        role: UserRole | str = UserRole.AGENT,
        active: bool = True,
    ) -> User:
        """Create a staff user.

        Raises
        ------
        PermissionDeniedError
            If the session may not create users.
        DuplicateEntityError
            If the username is taken.
        """
        require_permission(session.permissions, Resource.USERS, Action.CREATE)
        _check_password(password)

        users = self.repository.load_users()
        if any(u.username == username for u in users):
            raise DuplicateEntityError("El nombre de usuario ya existe")

        user = User(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=hash_password(password),
            full_name=full_name,
            email=email,
            role=UserRole(role),
            active=active,
            created_at=self.clock(),
        )
        users.append(user)
        self.repository.save_users(users)
        logger.info("Created user %s with role %s", username, user.role.value)
        return user

    def update_user(self, session: AuthSession, user_id: str, **changes: Any) -> User:
        """Update fields of a user. A ``password`` change is stored hashed."""
        require_permission(session.permissions, Resource.USERS, Action.UPDATE)
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        return self._update(user_id, **changes)

    def delete_user(self, session: AuthSession, user_id: str) -> bool:
        """Delete a user. Returns False if no such user exists."""
        require_permission(session.permissions, Resource.USERS, Action.DELETE)
        users = self.repository.load_users()
        remaining = [u for u in users if u.id != user_id]
        if len(remaining) == len(users):
            return False
        self.repository.save_users(remaining)
        logger.info("Deleted user %s", user_id)
        return True

    def login(self, username: str, password: str) -> AuthSession:
        """Authenticate and store the session marker.

        Raises
        ------
        AuthenticationError
            Unknown user, wrong password or inactive account.
        """
        self.initialize_users()
        user = self.get_user_by_username(username)
        if user is None:
            raise AuthenticationError("Usuario no encontrado")
        if not verify_password(password, user.password_hash):
            raise AuthenticationError("Contraseña incorrecta")
        if not user.active:
            raise AuthenticationError("Usuario inactivo. Contacte al administrador")

        changes: dict[str, Any] = {"last_login": self.clock()}
        if needs_rehash(user.password_hash):
            changes["password_hash"] = hash_password(password)
        user = self._update(user.id, **changes)
        self.repository.save_session_user_id(user.id)
        logger.info("User %s logged in", username)
        return AuthSession(user=user, permissions=permissions_for_role(user.role))

    def current_session(self) -> AuthSession:
        """Resolve the stored session.

        A missing or unreadable marker, or one pointing at a deleted or
        inactive user, yields an anonymous session and clears the marker.
        Permissions always come from the user's current role.
        """
        try:
            user_id = self.repository.load_session_user_id()
        except CorruptRecordError as e:
            logger.warning("Discarding unreadable session marker: %s", e)
            self.repository.clear_session()
            return AuthSession.anonymous()

        if user_id is None:
            return AuthSession.anonymous()

        user = self.get_user(user_id)
        if user is None or not user.active:
            self.repository.clear_session()
            return AuthSession.anonymous()
        return AuthSession(user=user, permissions=permissions_for_role(user.role))

    def change_password(self, username: str, current_password: str, new_password: str) -> AuthSession:
        """Change a user's own password and refresh the session."""
        self.initialize_users()
        user = self.get_user_by_username(username)
        if user is None:
            raise AuthenticationError("Usuario no encontrado")
        if not verify_password(current_password, user.password_hash):
            raise AuthenticationError("La contraseña actual es incorrecta")
        _check_password(new_password)

        user = self._update(user.id, password=new_password)
        self.repository.save_session_user_id(user.id)
        return AuthSession(user=user, permissions=permissions_for_role(user.role))

    def logout(self) -> None:
        self.repository.clear_session()

    def _update(self, user_id: str, **changes: Any) -> User:
        users = self.repository.load_users()
        idx = next((i for i, u in enumerate(users) if u.id == user_id), None)
        if idx is None:
            raise EntityNotFoundError("Usuario no encontrado")

        new_username = changes.get("username")
        if new_username and new_username != users[idx].username:
            if any(u.username == new_username for u in users):
                raise DuplicateEntityError("El nombre de usuario ya existe")

        if "password" in changes:
            password = changes.pop("password")
            _check_password(password)
            changes["password_hash"] = hash_password(password)
        if "role" in changes:
            changes["role"] = UserRole(changes["role"])

        users[idx] = replace(users[idx], **changes)
        self.repository.save_users(users)
        return users[idx]


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"La nueva contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres"
        )
