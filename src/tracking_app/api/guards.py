from __future__ import annotations

from functools import wraps
from typing import Callable, Optional

from flask import g, request

from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..security.policy import Denial, Policy
from ..security.tokens import Principal, TokenService


def make_guard(tokens: TokenService) -> Callable[[Policy], Callable]:
    """Build the ``guard(policy)`` decorator bound to one token service.

    The verified caller is stored on ``flask.g.principal``.
    """

    def resolve() -> Optional[Principal]:
        header = request.headers.get("Authorization")
        if not header:
            return None
        return tokens.principal_from_header(header)

    def guard(policy: Policy):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                principal = resolve() if getattr(policy, "requires_principal", True) else None
                decision = policy(principal)
                if not decision.allowed:
                    if decision.denial == Denial.UNAUTHENTICATED:
                        raise AuthenticationError(decision.reason)
                    raise AuthorizationError(decision.reason)
                g.principal = principal
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return guard


def current_principal() -> Principal:
    return g.principal


def json_body() -> dict:
    """Request JSON object; a missing body reads as ``{}``."""
    if not request.data:
        return {}
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def param(name: str, body: Optional[dict] = None):
    """Look a value up in the JSON body first, then in the query string."""
    if body and body.get(name) not in (None, ""):
        return body[name]
    return request.args.get(name)
