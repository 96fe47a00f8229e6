"""Registration, login, password recovery and profile routes."""

from __future__ import annotations

from flask import Response, jsonify, request

from ...services.auth import serialize_user
from ..common import current_user_id, get_context, json_body, login_required
from . import bp

REFRESH_COOKIE = "refresh_token"


def _set_refresh_cookie(response: Response, token: str) -> None:
    config = get_context().config
    response.set_cookie(
        REFRESH_COOKIE,
        token,
        max_age=config.REFRESH_TOKEN_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=not config.DEV_MODE,
        samesite="Lax" if config.DEV_MODE else "None",
        path="/",
    )


@bp.post("/register")
def register():
    user = get_context().auth.register(json_body())
    return jsonify({"user": serialize_user(user)}), 201


@bp.post("/login")
def login():
    auth = get_context().auth
    user, token = auth.login(json_body())
    response = jsonify({"token": token, "user": serialize_user(user)})
    _set_refresh_cookie(response, auth.tokens.issue_refresh(user))
    return response


@bp.post("/refresh-token")
def refresh_token():
    _, token, rotated = get_context().auth.refresh(request.cookies.get(REFRESH_COOKIE))
    response = jsonify({"token": token})
    _set_refresh_cookie(response, rotated)
    return response


@bp.post("/forgot-password")
def forgot_password():
    get_context().auth.forgot_password(json_body())
    return jsonify({"message": "A password recovery code has been sent."})


@bp.post("/reset-password")
def reset_password():
    get_context().auth.reset_password(json_body())
    return jsonify({"message": "Password has been reset."})


@bp.get("/me")
@login_required
def me():
    user = get_context().auth.get_user(current_user_id())
    return jsonify({"user": serialize_user(user)})


@bp.put("/me")
@login_required
def update_profile():
    user = get_context().auth.update_profile(current_user_id(), json_body())
    return jsonify({"message": "Profile updated", "user": serialize_user(user)})


@bp.patch("/me")
@login_required
def update_me():
    user = get_context().auth.update_preferences(current_user_id(), json_body())
    return jsonify({"user": serialize_user(user)})


@bp.put("/me/password")
@login_required
def change_password():
    get_context().auth.change_password(current_user_id(), json_body())
    return jsonify({"message": "Password updated."})
