from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ..core.constants import DEFAULT_TOKEN_HOURS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Identity carried by a verified bearer token."""

    user_id: int
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class TokenService:
    """Issues and verifies HS256 JWTs."""

    def __init__(self, secret: str, *, algorithm: str = "HS256", expires_hours: int = DEFAULT_TOKEN_HOURS):
        self._secret = secret
        self._algorithm = algorithm
        self._expires = timedelta(hours=int(expires_hours))

    def issue(self, *, user_id: int, email: str, role: Role, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "email": email,
            "role": role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self._expires).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Principal:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
            return Principal(
                user_id=int(payload["sub"]),
                email=str(payload.get("email", "")),
                role=Role(payload["role"]),
            )
        except (JWTError, KeyError, ValueError) as e:
            logger.warning("Rejected bearer token: %s", e)
            raise AuthenticationError("Invalid token.")

    def principal_from_header(self, header: Optional[str]) -> Principal:
        if not header or not header.startswith("Bearer "):
            raise AuthenticationError("Access denied. No token provided.")
        token = header.split(" ", 1)[1].strip()
        if not token:
            raise AuthenticationError("Access denied. No token provided.")
        return self.verify(token)
