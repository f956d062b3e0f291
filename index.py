# index.py
from flask import Blueprint, jsonify
from flask_login import current_user

from utils.clock import utcnow

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def home():
    return jsonify(
        {
            "service": "feed-admin",
            "status": "ok",
            "authenticated": current_user.is_authenticated,
            "time": utcnow().isoformat(),
        }
    )
