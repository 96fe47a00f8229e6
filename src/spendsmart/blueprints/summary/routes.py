"""Monthly summary route."""

from __future__ import annotations

from flask import jsonify, request

from ..common import current_user_id, get_context, login_required
from . import bp


@bp.get("/")
@login_required
def index():
    month = request.args.get("month") or None
    return jsonify(get_context().summary.monthly_summary(current_user_id(), month))
