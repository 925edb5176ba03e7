"""Composable authorization policies.

A policy looks at the (possibly missing) caller and returns a typed
``PolicyDecision`` instead of raising, so policies can be combined and tested
on their own. ``api.guards.guard`` turns a denial into the matching error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..core.enums import Role
from .tokens import Principal


class Denial(str, Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"


@dataclass(frozen=True)
class PolicyDecision:
    allowed: bool
    reason: str = ""
    denial: Optional[Denial] = None

    @classmethod
    def allow(cls) -> "PolicyDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, denial: Denial, reason: str) -> "PolicyDecision":
        return cls(allowed=False, reason=reason, denial=denial)


Policy = Callable[[Optional[Principal]], PolicyDecision]


def public() -> Policy:
    def check(principal: Optional[Principal]) -> PolicyDecision:
        return PolicyDecision.allow()

    check.requires_principal = False
    return check


def authenticated() -> Policy:
    def check(principal: Optional[Principal]) -> PolicyDecision:
        if principal is None:
            return PolicyDecision.deny(Denial.UNAUTHENTICATED, "Access denied. No token provided.")
        return PolicyDecision.allow()

    check.requires_principal = True
    return check


def has_role(*roles: Role) -> Policy:
    allowed_roles = frozenset(roles)

    def check(principal: Optional[Principal]) -> PolicyDecision:
        if principal is None:
            return PolicyDecision.deny(Denial.UNAUTHENTICATED, "Access denied. No user information.")
        if principal.role not in allowed_roles:
            return PolicyDecision.deny(Denial.FORBIDDEN, "Access denied. Insufficient permissions.")
        return PolicyDecision.allow()

    check.requires_principal = True
    return check


def all_of(*policies: Policy) -> Policy:
    """First denial wins; allows only when every policy allows."""

    def check(principal: Optional[Principal]) -> PolicyDecision:
        for policy in policies:
            decision = policy(principal)
            if not decision.allowed:
                return decision
        return PolicyDecision.allow()

    check.requires_principal = any(getattr(p, "requires_principal", True) for p in policies)
    return check


def admin_only() -> Policy:
    return all_of(authenticated(), has_role(Role.ADMIN))
