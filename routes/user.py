# routes/user.py
from flask import Blueprint, jsonify, request
from flask_login import login_required

from dao import user as user_dao
from schemas.user import UserIn, UserUpdate
from utils.cache import response_cache

user_bp = Blueprint("user_api", __name__, url_prefix="/api/users")


@user_bp.route("", methods=["GET"])
@login_required
def user_list():
    user_type = request.args.get("userType") or None
    return jsonify({"users": user_dao.list_users(user_type)})


@user_bp.route("", methods=["POST"])
@login_required
def user_add():
    data = UserIn.model_validate(request.get_json(silent=True) or {})
    user = user_dao.create_user(**data.model_dump())
    response_cache().invalidate("dashboard")
    return jsonify({"user": user.to_dict()}), 201


@user_bp.route("/<int:user_id>", methods=["GET"])
@login_required
def user_detail(user_id: int):
    user = user_dao.get_user(user_id)
    data = user.to_dict()
    data["bills"] = [b.to_dict() for b in user.bills]
    data["transactions"] = [t.to_dict() for t in user.transactions]
    return jsonify({"user": data})


@user_bp.route("/<int:user_id>", methods=["PUT"])
@login_required
def user_edit(user_id: int):
    data = UserUpdate.model_validate(request.get_json(silent=True) or {})
    user = user_dao.update_user(user_id, **data.model_dump())
    response_cache().invalidate("dashboard")
    return jsonify({"user": user.to_dict()})


@user_bp.route("/<int:user_id>", methods=["DELETE"])
@login_required
def user_delete(user_id: int):
    user_dao.delete_user(user_id)
    cache = response_cache()
    cache.invalidate("dashboard")
    cache.invalidate("feeds")
    return jsonify({"success": True})
