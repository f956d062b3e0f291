# routes/dashboard.py
from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required

from dao import report as report_dao
from utils.cache import response_cache

dashboard_bp = Blueprint("dashboard_api", __name__, url_prefix="/api/dashboard")


@dashboard_bp.route("/stats")
@login_required
def stats():
    period = request.args.get("period") or "month"
    key = f"dashboard:{period}"
    cache = response_cache()
    data = cache.get(key)
    if data is None:
        now = current_app.extensions["clock"]()
        data = report_dao.dashboard_stats(period, now=now)
        cache.set(key, data)
    return jsonify(data)
