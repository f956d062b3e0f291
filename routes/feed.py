# routes/feed.py
from flask import Blueprint, jsonify, request
from flask_login import login_required

from dao import feed as feed_dao
from schemas.feed import FeedIn
from utils.cache import response_cache

feed_bp = Blueprint("feed_api", __name__, url_prefix="/api/feeds")


def _invalidate():
    cache = response_cache()
    cache.invalidate("feeds")
    cache.invalidate("dashboard")


@feed_bp.route("", methods=["GET"])
@login_required
def feed_list():
    include_inactive = request.args.get("includeInactive", "").lower() in ("1", "true", "yes")
    key = f"feeds:{'all' if include_inactive else 'active'}"
    cache = response_cache()
    feeds = cache.get(key)
    if feeds is None:
        feeds = feed_dao.list_feeds(include_inactive=include_inactive)
        cache.set(key, feeds)
    return jsonify({"feeds": feeds})


@feed_bp.route("", methods=["POST"])
@login_required
def feed_add():
    data = FeedIn.model_validate(request.get_json(silent=True) or {})
    feed = feed_dao.create_feed(**data.model_dump())
    _invalidate()
    return jsonify({"feed": feed.to_dict()}), 201


@feed_bp.route("/<int:feed_id>", methods=["GET"])
@login_required
def feed_detail(feed_id: int):
    return jsonify({"feed": feed_dao.get_feed(feed_id).to_dict()})


@feed_bp.route("/<int:feed_id>", methods=["PUT"])
@login_required
def feed_edit(feed_id: int):
    data = FeedIn.model_validate(request.get_json(silent=True) or {})
    feed = feed_dao.update_feed(feed_id, **data.model_dump())
    _invalidate()
    return jsonify({"feed": feed.to_dict()})


@feed_bp.route("/<int:feed_id>", methods=["DELETE"])
@login_required
def feed_delete(feed_id: int):
    feed = feed_dao.deactivate_feed(feed_id)
    _invalidate()
    return jsonify({"success": True, "feed": feed.to_dict()})
