# dao/feed.py
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from configs import db
from db.models.bill import BillItem
from db.models.feed import Feed, FeedStatus
from utils.errors import NotFound, ValidationError


def _d(x) -> Decimal:
    return Decimal(str(x or 0))


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


def _sold_by_feed() -> Dict[int, Decimal]:
    return {
        fid: _d(total)
        for (fid, total) in db.session.query(
            BillItem.feed_id, func.sum(BillItem.quantity)
        )
        .group_by(BillItem.feed_id)
        .all()
    }


def list_feeds(include_inactive: bool = False) -> List[dict]:
    """Feeds by name with sold quantity and total (current + sold) stock."""
    q = Feed.query
    if not include_inactive:
        q = q.filter(Feed.status == FeedStatus.ACTIVE)
    sold = _sold_by_feed()
    rows = []
    for feed in q.order_by(Feed.name.asc()).all():
        data = feed.to_dict()
        sold_qty = sold.get(feed.id, Decimal("0"))
        data["soldStock"] = float(sold_qty)
        data["totalStock"] = float(_d(feed.stock) + sold_qty)
        rows.append(data)
    return rows


def get_feed(feed_id: int) -> Feed:
    feed = db.session.get(Feed, int(feed_id))
    if not feed:
        raise NotFound("Feed not found")
    return feed


def _apply_stock(
    feed: Feed, stock, shop_stock: Optional[Decimal], godown_stock: Optional[Decimal]
) -> None:
    # location counters win; the aggregate follows their sum
    if shop_stock is None and godown_stock is None:
        if stock is None:
            return
        located = _d(feed.shop_stock) + _d(feed.godown_stock)
        if located > 0 and _d(stock) != located:
            raise ValidationError(
                "Stock is the sum of shop and godown stock",
                details=[
                    {
                        "field": "stock",
                        "message": "Set shopStock or godownStock instead",
                    }
                ],
            )
        feed.stock = _d(stock)
        return
    if shop_stock is not None:
        feed.shop_stock = _d(shop_stock)
    if godown_stock is not None:
        feed.godown_stock = _d(godown_stock)
    feed.stock = _d(feed.shop_stock) + _d(feed.godown_stock)


def create_feed(
    name: str,
    weight,
    default_price,
    brand: Optional[str] = None,
    stock=None,
    shop_stock=None,
    godown_stock=None,
) -> Feed:
    feed = Feed(
        name=name.strip(),
        brand=(brand or None),
        weight=_d(weight),
        default_price=_d(default_price),
        shop_stock=Decimal("0"),
        godown_stock=Decimal("0"),
        stock=Decimal("0"),
        status=FeedStatus.ACTIVE,
    )
    _apply_stock(feed, stock, shop_stock, godown_stock)
    db.session.add(feed)
    _commit()
    return feed


def update_feed(
    feed_id: int,
    name: str,
    weight,
    default_price,
    brand: Optional[str] = None,
    stock=None,
    shop_stock=None,
    godown_stock=None,
) -> Feed:
    feed = get_feed(feed_id)
    _apply_stock(feed, stock, shop_stock, godown_stock)
    feed.name = name.strip()
    feed.brand = brand or None
    feed.weight = _d(weight)
    feed.default_price = _d(default_price)
    _commit()
    return feed


def deactivate_feed(feed_id: int) -> Feed:
    """Feeds are referenced by old bills, so they are never hard-deleted."""
    feed = get_feed(feed_id)
    feed.status = FeedStatus.INACTIVE
    _commit()
    return feed
