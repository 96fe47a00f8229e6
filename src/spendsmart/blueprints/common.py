"""Helpers shared by the API blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from flask import current_app, g, request

from ..context import AppContext
from ..errors import AuthenticationError, ValidationError
from ..services.auth import Identity


def get_context() -> AppContext:
    return current_app.extensions["spendsmart"]


def json_body() -> dict[str, Any]:
    """Request JSON as a dict; a missing body is treated as empty."""

    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(message="Request body must be a JSON object")
    return data


def login_required(view: Callable) -> Callable:
    """Resolve the bearer token into ``g.identity`` or answer 401."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        scheme, _, token = request.headers.get("Authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthenticationError("Authentication required")
        g.identity = get_context().auth.resolve(token.strip())
        return view(*args, **kwargs)

    return wrapper


def current_identity() -> Identity:
    return g.identity


def current_user_id() -> int:
    return g.identity.id
