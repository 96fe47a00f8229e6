"""Category registry routes; the registry itself is read-only over HTTP."""

from __future__ import annotations

from flask import jsonify, request

from ...services.categories import list_categories, resolve_category, serialize_category
from ..common import get_context, login_required
from . import bp


@bp.get("/")
@login_required
def index():
    applies_to = request.args.get("type") or None
    categories = list_categories(get_context().category_repo, applies_to=applies_to)
    return jsonify({"categories": [serialize_category(item) for item in categories]})


@bp.get("/<int:category_id>")
@login_required
def show(category_id: int):
    category = resolve_category(get_context().category_repo, category_id)
    return jsonify({"category": serialize_category(category)})
