"""Budget routes."""

from __future__ import annotations

from flask import jsonify

from ...services.budgeting import serialize_budget
from ..common import current_user_id, get_context, json_body, login_required
from . import bp


@bp.post("/")
@login_required
def create():
    budget = get_context().budgets.create_budget(current_user_id(), json_body())
    return jsonify({"budget": serialize_budget(budget)})


@bp.get("/")
@login_required
def index():
    evaluations = get_context().budgets.list_budgets(current_user_id())
    return jsonify({"budgets": [item.to_dict() for item in evaluations]})


@bp.patch("/<int:budget_id>/toggle")
@login_required
def toggle(budget_id: int):
    budget, message = get_context().budgets.toggle_budget(current_user_id(), budget_id)
    return jsonify({"budget": serialize_budget(budget), "message": message})


@bp.delete("/<int:budget_id>")
@login_required
def delete(budget_id: int):
    get_context().budgets.delete_budget(current_user_id(), budget_id)
    return jsonify({"message": "Budget deleted"})
