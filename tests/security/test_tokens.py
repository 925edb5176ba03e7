from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tracking_app.core.enums import Role
from tracking_app.core.exceptions import AuthenticationError
from tracking_app.security.tokens import TokenService


@pytest.fixture
def tokens():
    return TokenService("unit-test-secret", expires_hours=1)


def test_round_trip(tokens):
    token = tokens.issue(user_id=7, email="a@b.com", role=Role.ADMIN)

    principal = tokens.principal_from_header(f"Bearer {token}")

    assert principal.user_id == 7
    assert principal.is_admin


def test_expired_token_is_rejected(tokens):
    token = tokens.issue(user_id=7, email="a@b.com", role=Role.STAFF, now=datetime.now(timezone.utc) - timedelta(hours=2))

    with pytest.raises(AuthenticationError):
        tokens.verify(token)


def test_token_from_other_secret_is_rejected(tokens):
    token = TokenService("another-secret").issue(user_id=7, email="a@b.com", role=Role.STAFF)

    with pytest.raises(AuthenticationError):
        tokens.verify(token)


@pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer "])
def test_missing_or_malformed_header(tokens, header):
    with pytest.raises(AuthenticationError):
        tokens.principal_from_header(header)
