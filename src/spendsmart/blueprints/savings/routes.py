"""Savings goal routes."""

from __future__ import annotations

from flask import jsonify

from ...services.savings import serialize_goal
from ..common import current_user_id, get_context, json_body, login_required
from . import bp


@bp.post("/")
@login_required
def create():
    goal = get_context().savings.create_goal(current_user_id(), json_body())
    return jsonify({"goal": serialize_goal(goal)}), 201


@bp.get("/")
@login_required
def index():
    return jsonify({"goals": get_context().savings.list_goals(current_user_id())})


@bp.put("/<int:goal_id>")
@login_required
def update(goal_id: int):
    goal = get_context().savings.update_goal(current_user_id(), goal_id, json_body())
    return jsonify({"goal": serialize_goal(goal)})


@bp.patch("/<int:goal_id>/add-money")
@login_required
def add_money(goal_id: int):
    result = get_context().savings.add_money(current_user_id(), goal_id, json_body())
    return jsonify({"goal": result})


@bp.delete("/<int:goal_id>")
@login_required
def delete(goal_id: int):
    get_context().savings.delete_goal(current_user_id(), goal_id)
    return jsonify({"message": "Savings goal deleted"})
