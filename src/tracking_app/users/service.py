from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, parse_bool, require_int, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import RequestStatus, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..security.tokens import TokenService
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


def parse_role(value: Any) -> Role:
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError("role must be STAFF or ADMIN")


@dataclass(frozen=True)
class LoginResult:
    user: User
    token: str


class AuthService:
    """Use case: self-registration and login."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def register(
        self,
        *,
        email: Any,
        password: Any,
        first_name: Any,
        last_name: Any,
        position: Any = None,
        department: Any = None,
    ) -> User:
        email = require_non_empty(email, "email").lower()
        if "@" not in email:
            raise ValidationError("email is not valid")
        require_min_length(password if isinstance(password, str) else None, "password", MIN_PASSWORD_LENGTH)
        first_name = require_non_empty(first_name, "firstName")
        last_name = require_non_empty(last_name, "lastName")

        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered")

        user_id = self._users.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            role=Role.STAFF,
            position=optional_text(position),
            department=optional_text(department),
            is_active=False,
            approval_status=RequestStatus.PENDING,
        )
        logger.info("Registration received for %s (user %s), awaiting approval", email, user_id)
        return self._users.get_by_id(user_id)

    def authenticate(self, email: Any, password: Any) -> LoginResult:
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self._users.get_by_email(str(email).strip().lower())
        try:
            ok = bool(user) and check_password_hash(user.password_hash, str(password))
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("Failed login for %s", email)
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise AuthenticationError("Account is not active. Please wait for admin approval.")

        token = self._tokens.issue(user_id=user.user_id, email=user.email, role=user.role)
        return LoginResult(user=user, token=token)


class UserService:
    """Use case: admin user management and own-profile maintenance."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, *, current_role: Role, role: Any = None, is_active: Any = None) -> Sequence[User]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied. Insufficient permissions.")
        return self._users.list_users(
            role=parse_role(role) if role else None,
            is_active=parse_bool(is_active, "isActive") if is_active not in (None, "") else None,
        )

    def admin_update(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        user_id: Any,
        changes: dict,
    ) -> User:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied. Insufficient permissions.")
        user = self.get(require_int(user_id, "id"))

        fields: dict = {}
        if changes.get("role") is not None:
            fields["role"] = parse_role(changes["role"])
        if changes.get("isActive") is not None:
            fields["is_active"] = parse_bool(changes["isActive"], "isActive")
        if "position" in changes:
            fields["position"] = optional_text(changes["position"])
        if "department" in changes:
            fields["department"] = optional_text(changes["department"])

        if user.user_id == int(admin_user_id):
            if fields.get("role", Role.ADMIN) != Role.ADMIN or fields.get("is_active", True) is False:
                raise ValidationError("You cannot demote or deactivate your own account")

        if fields.get("is_active") is True and not user.is_active:
            if user.approval_status == RequestStatus.REJECTED:
                raise ConflictError("Cannot activate a rejected registration")
            if user.approval_status == RequestStatus.PENDING:
                # activating here settles the registration too
                fields["approval_status"] = RequestStatus.APPROVED

        self._users.update(user.user_id, fields)
        logger.info("User %s updated by admin %s: %s", user.user_id, admin_user_id, sorted(fields))
        return self.get(user.user_id)

    def deactivate(self, *, current_role: Role, admin_user_id: int, user_id: Any) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied. Insufficient permissions.")
        user = self.get(require_int(user_id, "id"))
        if user.user_id == int(admin_user_id):
            raise ValidationError("You cannot demote or deactivate your own account")

        self._users.update(user.user_id, {"is_active": False})
        logger.info("User %s deactivated by admin %s", user.user_id, admin_user_id)

    def update_profile(self, user_id: int, changes: dict) -> User:
        user = self.get(user_id)

        fields: dict = {}
        if changes.get("firstName") is not None:
            fields["first_name"] = require_non_empty(changes["firstName"], "firstName")
        if changes.get("lastName") is not None:
            fields["last_name"] = require_non_empty(changes["lastName"], "lastName")
        if "position" in changes:
            fields["position"] = optional_text(changes["position"])
        if "department" in changes:
            fields["department"] = optional_text(changes["department"])

        # Only allow password update when long enough, as the mobile client expects.
        password = changes.get("password")
        if isinstance(password, str) and len(password) >= MIN_PASSWORD_LENGTH:
            fields["password_hash"] = generate_password_hash(password)

        self._users.update(user.user_id, fields)
        return self.get(user.user_id)
