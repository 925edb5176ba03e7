from __future__ import annotations

from tracking_app.core.enums import Role
from tracking_app.security.policy import Denial, admin_only, all_of, authenticated, has_role, public
from tracking_app.security.tokens import Principal

ADMIN = Principal(user_id=1, email="admin@tracking.com", role=Role.ADMIN)
STAFF = Principal(user_id=2, email="staff@tracking.com", role=Role.STAFF)


def test_public_allows_anonymous():
    assert public()(None).allowed is True
    assert public().requires_principal is False


def test_authenticated_denies_anonymous():
    decision = authenticated()(None)

    assert decision.allowed is False
    assert decision.denial == Denial.UNAUTHENTICATED
    assert authenticated()(STAFF).allowed is True


def test_has_role_forbids_other_roles():
    decision = has_role(Role.ADMIN)(STAFF)

    assert decision.allowed is False
    assert decision.denial == Denial.FORBIDDEN
    assert decision.reason == "Access denied. Insufficient permissions."
    assert has_role(Role.ADMIN, Role.STAFF)(STAFF).allowed is True


def test_all_of_returns_first_denial():
    decision = all_of(authenticated(), has_role(Role.ADMIN))(None)

    assert decision.denial == Denial.UNAUTHENTICATED
    assert all_of(public(), public()).requires_principal is False


def test_admin_only():
    assert admin_only()(ADMIN).allowed is True
    assert admin_only()(STAFF).denial == Denial.FORBIDDEN
