# routes/payment.py
from flask import Blueprint, jsonify, request
from flask_login import login_required

from dao import payment as pay_dao
from schemas.bill import PaymentIn
from utils.cache import response_cache

payment_bp = Blueprint("payment_api", __name__, url_prefix="/api/payments")


@payment_bp.route("", methods=["GET"])
@login_required
def payment_list():
    txs = pay_dao.list_transactions(bill_id=request.args.get("billId", type=int))
    return jsonify({"transactions": [t.to_dict() for t in txs]})


@payment_bp.route("", methods=["POST"])
@login_required
def payment_add():
    data = PaymentIn.model_validate(request.get_json(silent=True) or {})
    tx = pay_dao.record_payment(data.bill_id, data.amount, data.description)
    response_cache().invalidate("dashboard")
    return jsonify({"transaction": tx.to_dict()}), 201
