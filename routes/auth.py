# routes/auth.py
import logging

from flask import Blueprint, jsonify, request, session
from flask_login import current_user, login_required, login_user, logout_user

from dao import admin as admin_dao
from schemas.auth import LoginRequest
from utils.auth import issue_token

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/login", methods=["POST"])
def login():
    data = LoginRequest.model_validate(request.get_json(silent=True) or {})
    admin = admin_dao.authenticate(data.mobile_no, data.password)

    if not admin:
        logger.info("failed login for %s", data.mobile_no)
        return jsonify({"error": "Invalid mobile number or password"}), 401

    if not admin.is_active:
        return jsonify({"error": "Account is disabled"}), 403

    login_user(admin, remember=True)
    return jsonify({"success": True, "admin": admin.to_dict(), "token": issue_token(admin)})


@auth_bp.route("/me")
@login_required
def me():
    return jsonify({"admin": current_user.to_dict()})


@auth_bp.route("/logout", methods=["POST"])
def logout():
    if current_user.is_authenticated:
        logout_user()
        session.clear()
    return jsonify({"success": True})
