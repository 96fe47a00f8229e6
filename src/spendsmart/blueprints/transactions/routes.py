"""Transaction routes."""

from __future__ import annotations

from flask import jsonify

from ...services.ledger_service import serialize_transaction
from ..common import current_user_id, get_context, json_body, login_required
from . import bp


@bp.post("/")
@login_required
def create():
    transaction = get_context().ledger.create_transaction(current_user_id(), json_body())
    return jsonify({"transaction": serialize_transaction(transaction)}), 201


@bp.put("/<int:transaction_id>")
@login_required
def update(transaction_id: int):
    transaction = get_context().ledger.update_transaction(
        current_user_id(), transaction_id, json_body()
    )
    return jsonify({"transaction": serialize_transaction(transaction)})


@bp.delete("/<int:transaction_id>")
@login_required
def delete(transaction_id: int):
    get_context().ledger.delete_transaction(current_user_id(), transaction_id)
    return jsonify({"message": "Transaction deleted"})


@bp.post("/filter")
@login_required
def filter_transactions():
    rows = get_context().ledger.filter_transactions(current_user_id(), json_body())
    return jsonify({"transactions": [serialize_transaction(row) for row in rows]})
