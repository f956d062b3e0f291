# dao/stock.py
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy import case

from configs import db
from db.models.bill import StorageLocation
from db.models.feed import Feed
from utils.errors import InsufficientStock, NotFound


def _dec(x) -> Decimal:
    return Decimal(str(x or 0))


def normalize_location(location: Optional[str]) -> str:
    """Storage location as recorded on the bill line. Empty -> godown."""
    loc = (location or "").strip()
    return loc or StorageLocation.GODOWN


def _counter_for(location: str) -> str:
    # any custom location draws from the godown counter
    if location.lower() == StorageLocation.SHOP:
        return StorageLocation.SHOP
    return StorageLocation.GODOWN


def available_stock(feed: Feed, location: str) -> Tuple[Decimal, str]:
    """
    (available quantity, counter it comes from) for a sale at `location`.
    The legacy aggregate is used only while both location counters read zero.
    """
    shop = _dec(feed.shop_stock)
    godown = _dec(feed.godown_stock)
    if shop == 0 and godown == 0:
        return _dec(feed.stock), StorageLocation.LEGACY
    if _counter_for(location) == StorageLocation.SHOP:
        return shop, StorageLocation.SHOP
    return godown, StorageLocation.GODOWN


def get_feed_or_fail(feed_id: int, lock: bool = False) -> Feed:
    q = db.session.query(Feed).filter(Feed.id == int(feed_id))
    if lock:
        q = q.with_for_update().populate_existing()
    feed = q.one_or_none()
    if feed is None:
        raise NotFound(f"Feed with ID {feed_id} not found", status_code=400)
    return feed


def check_lines(lines: Iterable[Dict], lock: bool = False) -> Dict[int, Feed]:
    """
    Validate that every line fits in stock. Lines hitting the same counter of
    the same feed are summed before comparing. Returns {feed_id: Feed} and
    stamps each line with the `stock_source` it will be debited from.
    """
    feeds: Dict[int, Feed] = {}
    requested = defaultdict(Decimal)
    for ln in lines:
        fid = int(ln["feed_id"])
        if fid not in feeds:
            feeds[fid] = get_feed_or_fail(fid, lock=lock)
        feed = feeds[fid]
        available, source = available_stock(feed, ln["storage_location"])
        requested[(fid, source)] += ln["quantity"]
        if requested[(fid, source)] > available:
            raise InsufficientStock(feed.name, available)
        ln["stock_source"] = source
    return feeds


def debit(feed_id: int, source: str, qty) -> None:
    """
    Relative decrement of the source counter. The update only matches while
    that counter holds enough, so concurrent sales can never drive it below
    zero. The legacy mirror follows and is floored at zero.
    """
    qty = _dec(qty)
    q = db.session.query(Feed).filter(Feed.id == feed_id)
    if source == StorageLocation.SHOP:
        counter = Feed.shop_stock
    elif source == StorageLocation.GODOWN:
        counter = Feed.godown_stock
    else:
        counter = Feed.stock
    q = q.filter(counter >= qty)
    values = {counter: counter - qty}
    if source != StorageLocation.LEGACY:
        values[Feed.stock] = case((Feed.stock >= qty, Feed.stock - qty), else_=0)
    matched = q.update(values, synchronize_session="fetch")
    if matched != 1:
        feed = get_feed_or_fail(feed_id, lock=True)
        raise InsufficientStock(feed.name, getattr(feed, counter.key))


def credit(feed_id: int, source: str, qty) -> None:
    """Reverse a debit: give the quantity back to the counter it came from."""
    qty = _dec(qty)
    values = {Feed.stock: Feed.stock + qty}
    if source == StorageLocation.SHOP:
        values[Feed.shop_stock] = Feed.shop_stock + qty
    elif source == StorageLocation.GODOWN:
        values[Feed.godown_stock] = Feed.godown_stock + qty
    db.session.query(Feed).filter(Feed.id == feed_id).update(
        values, synchronize_session="fetch"
    )
