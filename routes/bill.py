# routes/bill.py
from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required

from dao import bill as bill_dao
from schemas.bill import BillIn
from utils.cache import response_cache

bill_bp = Blueprint("bill_api", __name__, url_prefix="/api/bills")


def _invalidate():
    cache = response_cache()
    cache.invalidate("dashboard")
    cache.invalidate("feeds")


@bill_bp.route("", methods=["GET"])
@login_required
def bill_list():
    bills = bill_dao.list_bills(user_id=request.args.get("userId", type=int))
    return jsonify({"bills": [b.to_dict() for b in bills]})


@bill_bp.route("", methods=["POST"])
@login_required
def bill_add():
    data = BillIn.model_validate(request.get_json(silent=True) or {})
    cfg = current_app.config
    bill = bill_dao.create_bill(
        data.user_id,
        [it.model_dump() for it in data.items],
        status=data.status,
        paid_amount=data.paid_amount,
        clock=current_app.extensions["clock"],
        window_seconds=cfg["DUPLICATE_BILL_WINDOW_SECONDS"],
        lookback=cfg["DUPLICATE_BILL_LOOKBACK"],
    )
    _invalidate()
    return jsonify({"bill": bill.to_dict()}), 201


@bill_bp.route("/<int:bill_id>", methods=["GET"])
@login_required
def bill_detail(bill_id: int):
    bill = bill_dao.get_bill(bill_id)
    return jsonify({"bill": bill.to_dict(with_transactions=True)})


@bill_bp.route("/<int:bill_id>", methods=["DELETE"])
@login_required
def bill_delete(bill_id: int):
    bill_dao.delete_bill(bill_id)
    _invalidate()
    return jsonify({"success": True})
