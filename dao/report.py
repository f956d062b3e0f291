# dao/report.py
"""
Read-only rollups for the dashboard and the PDF sales report.

Nothing in here writes to the session; every figure is derived from bills,
bill items, users and feeds at call time.
"""
from collections import OrderedDict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import joinedload, selectinload

from configs import db
from db.models.bill import Bill, BillItem, BillRecordStatus, BillStatus
from db.models.feed import Feed
from db.models.user import User
from utils.clock import utcnow
from utils.errors import ValidationError

PERIODS = ("today", "month", "year")
REPORT_TYPES = ("today", "monthly", "yearly")
MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]
OPEN_STATUSES = (BillStatus.PENDING, BillStatus.PARTIAL)


def _d(x) -> Decimal:
    return Decimal(str(x or 0))


def _start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _start_of_month(now: datetime) -> datetime:
    return _start_of_day(now).replace(day=1)


def _start_of_year(now: datetime) -> datetime:
    return _start_of_month(now).replace(month=1)


def _shift_month(now: datetime, back: int):
    y, m = divmod(now.year * 12 + now.month - 1 - back, 12)
    return y, m + 1


def period_start(period: str, now: datetime) -> datetime:
    if period == "today":
        return _start_of_day(now)
    if period == "year":
        return _start_of_year(now)
    return _start_of_month(now)


def _active_bills():
    return Bill.query.filter(Bill.bill_status == BillRecordStatus.ACTIVE)


def _sales_since(start: datetime) -> Decimal:
    s = (
        db.session.query(func.sum(Bill.total_amount))
        .filter(Bill.bill_status == BillRecordStatus.ACTIVE, Bill.created_at >= start)
        .scalar()
    )
    return _d(s)


def creditors() -> List[dict]:
    """Users with open bills and what they still owe, largest first."""
    rows = (
        db.session.query(
            User.id, User.name, User.mobile_no, func.sum(Bill.pending_amount)
        )
        .join(Bill, Bill.user_id == User.id)
        .filter(
            Bill.bill_status == BillRecordStatus.ACTIVE,
            Bill.status.in_(OPEN_STATUSES),
        )
        .group_by(User.id, User.name, User.mobile_no)
        .all()
    )
    data = [
        {"id": uid, "name": name, "mobileNo": mobile, "totalPending": float(_d(total))}
        for (uid, name, mobile, total) in rows
    ]
    return sorted(data, key=lambda r: r["totalPending"], reverse=True)


def chart_data(period: str, now: datetime) -> List[dict]:
    """Sales bucketed per hour (today), per day (month) or per month (year)."""
    bills = (
        db.session.query(Bill.created_at, Bill.total_amount)
        .filter(
            Bill.bill_status == BillRecordStatus.ACTIVE,
            Bill.created_at >= period_start(period, now),
        )
        .all()
    )

    buckets: Dict[str, Decimal] = {}
    for created_at, total in bills:
        if period == "today":
            key = f"{created_at.hour}:00"
        elif period == "year":
            key = f"{created_at.year}-{created_at.month:02d}"
        else:
            key = created_at.date().isoformat()
        buckets[key] = buckets.get(key, Decimal("0")) + _d(total)

    chart = []
    if period == "today":
        for i in range(23, -1, -1):
            key = f"{(now - timedelta(hours=i)).hour}:00"
            chart.append({"date": key, "sales": float(buckets.get(key, 0))})
    elif period == "year":
        for i in range(11, -1, -1):
            y, m = _shift_month(now, i)
            chart.append(
                {
                    "date": f"{MONTH_NAMES[m - 1]} {y}",
                    "sales": float(buckets.get(f"{y}-{m:02d}", 0)),
                }
            )
    else:
        for i in range(29, -1, -1):
            day = (now - timedelta(days=i)).date()
            chart.append(
                {
                    "date": f"{day.day:02d}/{day.month:02d}",
                    "sales": float(buckets.get(day.isoformat(), 0)),
                }
            )
    return chart


def feed_sales(start: datetime) -> List[dict]:
    """Quantity and revenue per feed since `start`, most sold first."""
    rows = (
        db.session.query(
            Feed, func.sum(BillItem.quantity), func.sum(BillItem.total_price)
        )
        .join(BillItem, BillItem.feed_id == Feed.id)
        .join(Bill, Bill.id == BillItem.bill_id)
        .filter(Bill.bill_status == BillRecordStatus.ACTIVE, Bill.created_at >= start)
        .group_by(Feed.id)
        .all()
    )
    merged: "OrderedDict[str, dict]" = OrderedDict()
    for feed, qty, revenue in rows:
        entry = merged.setdefault(
            feed.label, {"name": feed.label, "value": Decimal("0"), "totalPrice": Decimal("0")}
        )
        entry["value"] += _d(qty)
        entry["totalPrice"] += _d(revenue)
    ranked = sorted(merged.values(), key=lambda r: r["value"], reverse=True)
    return [
        {"name": r["name"], "value": float(r["value"]), "totalPrice": float(r["totalPrice"])}
        for r in ranked
    ]


def dashboard_stats(period: str = "month", now: Optional[datetime] = None) -> dict:
    if period not in PERIODS:
        raise ValidationError(
            details=[{"field": "period", "message": f"Use one of {', '.join(PERIODS)}"}]
        )
    now = now or utcnow()

    pending = (
        db.session.query(func.sum(Bill.pending_amount))
        .filter(
            Bill.bill_status == BillRecordStatus.ACTIVE,
            Bill.status.in_(OPEN_STATUSES),
        )
        .scalar()
    )
    total_users = db.session.query(func.count(User.id)).scalar() or 0
    users_owing = (
        db.session.query(func.count(func.distinct(Bill.user_id)))
        .filter(
            Bill.bill_status == BillRecordStatus.ACTIVE,
            Bill.status.in_(OPEN_STATUSES),
        )
        .scalar()
        or 0
    )
    total_stock = db.session.query(func.sum(Feed.stock)).scalar()

    return {
        "todaySales": float(_sales_since(_start_of_day(now))),
        "monthSales": float(_sales_since(_start_of_month(now))),
        "pendingAmount": float(_d(pending)),
        "totalUsers": total_users,
        "totalFeeds": db.session.query(func.count(Feed.id)).scalar() or 0,
        "totalStock": float(_d(total_stock)),
        "creditors": creditors(),
        # users with every bill settled (or no bills at all)
        "debtors": total_users - users_owing,
        "chartData": chart_data(period, now),
        "feedSalesData": feed_sales(period_start(period, now)),
    }


# ---------- PDF report ----------
def report_range(report_type: str, now: datetime):
    if report_type == "today":
        return _start_of_day(now), now
    if report_type == "monthly":
        return _start_of_month(now), now
    return _start_of_year(now), now


def report_bills(
    report_type: str = "monthly",
    user_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[Bill]:
    now = now or utcnow()
    start, end = report_range(report_type, now)
    q = _active_bills().options(
        joinedload(Bill.user),
        selectinload(Bill.items).joinedload(BillItem.feed),
        selectinload(Bill.transactions),
    )
    q = q.filter(Bill.created_at >= start, Bill.created_at <= end)
    if user_id:
        q = q.filter(Bill.user_id == int(user_id))
    return q.order_by(Bill.created_at.desc(), Bill.id.desc()).all()


def summarize(bills: List[Bill]) -> dict:
    return {
        "count": len(bills),
        "totalSales": sum((_d(b.total_amount) for b in bills), Decimal("0")),
        "totalPaid": sum((_d(b.paid_amount) for b in bills), Decimal("0")),
        "totalPending": sum((_d(b.pending_amount) for b in bills), Decimal("0")),
        "paid": sum(1 for b in bills if b.status == BillStatus.PAID),
        "partial": sum(1 for b in bills if b.status == BillStatus.PARTIAL),
        "pending": sum(1 for b in bills if b.status == BillStatus.PENDING),
    }
