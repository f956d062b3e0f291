# dao/bill.py
import logging
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import joinedload, selectinload

from configs import db
from dao import stock as stock_dao
from db.models.bill import Bill, BillItem, BillRecordStatus, BillStatus
from db.models.user import User, UserStatus
from utils.clock import utcnow
from utils.errors import (
    AppError,
    BillNumberConflict,
    DuplicateBill,
    NotFound,
    PersistenceFailure,
    ValidationError,
)

logger = logging.getLogger(__name__)

BILL_NUMBER_PREFIX = "BILL-"
DUPLICATE_WINDOW_SECONDS = 10
DUPLICATE_LOOKBACK = 5
CENT = Decimal("0.01")
QTY_STEP = Decimal("0.001")

_BILL_FORM_TO_ENUM = {
    "pending": BillStatus.PENDING,
    "partial": BillStatus.PARTIAL,
    "paid": BillStatus.PAID,
}


def _d(x) -> Decimal:
    return Decimal(str(x or 0))


def _money(x) -> Decimal:
    return _d(x).quantize(CENT, rounding=ROUND_HALF_UP)


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


def _to_bill_status(v) -> Optional[BillStatus]:
    if v is None or v == "":
        return None
    if isinstance(v, BillStatus):
        return v
    status = _BILL_FORM_TO_ENUM.get(str(v).strip().lower())
    if status is None:
        raise ValidationError(
            details=[{"field": "status", "message": f"Unknown status '{v}'"}]
        )
    return status


# ---------- money rules ----------
def derive_status(total, paid) -> BillStatus:
    total, paid = _d(total), _d(paid)
    if total <= 0 or total - paid <= 0:
        return BillStatus.PAID
    if paid <= 0:
        return BillStatus.PENDING
    return BillStatus.PARTIAL


def settle_amounts(
    total, status=None, paid_amount=None
) -> Tuple[Decimal, Decimal, BillStatus]:
    """(paid, pending, status) for a new bill."""
    total = _money(total)
    explicit = _to_bill_status(status)

    if paid_amount is None:
        if explicit == BillStatus.PAID:
            paid = total
        elif explicit == BillStatus.PARTIAL:
            raise ValidationError(
                details=[
                    {
                        "field": "paidAmount",
                        "message": "Paid amount is required for a partial bill",
                    }
                ]
            )
        else:
            paid = Decimal("0")
    else:
        paid = _money(paid_amount)

    if paid < 0:
        raise ValidationError(
            details=[{"field": "paidAmount", "message": "Must be non-negative"}]
        )
    if paid > total:
        raise ValidationError(
            details=[
                {
                    "field": "paidAmount",
                    "message": "Paid amount cannot exceed the bill total",
                }
            ]
        )

    derived = derive_status(total, paid)
    if explicit is not None and explicit != derived:
        raise ValidationError(
            details=[
                {
                    "field": "status",
                    "message": f"Status '{explicit.value}' does not match the paid amount",
                }
            ]
        )
    return paid, total - paid, derived


def _normalize_lines(items: List[Dict]) -> List[Dict]:
    if not items:
        raise ValidationError(
            details=[{"field": "items", "message": "At least one item is required"}]
        )
    lines = []
    for i, it in enumerate(items):
        # stored precision of the bill_item columns
        qty = _d(it.get("quantity")).quantize(QTY_STEP, rounding=ROUND_HALF_UP)
        price = _money(it.get("unit_price"))
        if qty <= 0:
            raise ValidationError(
                details=[{"field": f"items.{i}.quantity", "message": "Must be positive"}]
            )
        if price < 0:
            raise ValidationError(
                details=[
                    {"field": f"items.{i}.unit_price", "message": "Must be non-negative"}
                ]
            )
        lines.append(
            {
                "feed_id": int(it["feed_id"]),
                "quantity": qty,
                "unit_price": price,
                "total_price": _money(qty * price),
                "storage_location": stock_dao.normalize_location(
                    it.get("storage_location")
                ),
            }
        )
    return lines


def _calc_total(lines: List[Dict]) -> Decimal:
    s = Decimal("0")
    for ln in lines:
        s += ln["total_price"]
    return _money(s)


# ---------- numbering / duplicates ----------
def next_bill_number() -> str:
    """
    BILL-{n+1:06d}. n is the bill count, raised to the highest issued
    sequence so numbers stay unique after deletions.
    """
    seq = db.session.query(func.count(Bill.id)).scalar() or 0
    last = (
        db.session.query(Bill.bill_number)
        .order_by(Bill.bill_number.desc())
        .limit(1)
        .scalar()
    )
    if last and last.startswith(BILL_NUMBER_PREFIX):
        try:
            seq = max(seq, int(last[len(BILL_NUMBER_PREFIX):]))
        except ValueError:
            pass
    return f"{BILL_NUMBER_PREFIX}{seq + 1:06d}"


def find_duplicate(
    user_id: int,
    total: Decimal,
    lines: List[Dict],
    now: datetime,
    window_seconds: int = DUPLICATE_WINDOW_SECONDS,
    lookback: int = DUPLICATE_LOOKBACK,
) -> Optional[Bill]:
    """
    Most recent bill of the same user and total, created inside the window,
    whose (feed, quantity) pairs match the request. Best effort only: two
    requests racing each other can both miss.
    """
    since = now - timedelta(seconds=window_seconds)
    recent = (
        Bill.query.options(selectinload(Bill.items))
        .filter(
            Bill.user_id == user_id,
            Bill.total_amount == total,
            Bill.created_at >= since,
        )
        .order_by(Bill.created_at.desc())
        .limit(lookback)
        .all()
    )
    wanted = [(ln["feed_id"], ln["quantity"]) for ln in lines]
    for bill in recent:
        if len(bill.items) != len(wanted):
            continue
        have = {(it.feed_id, _d(it.quantity)) for it in bill.items}
        if all(key in have for key in wanted):
            return bill
    return None


# ---------- public APIs ----------
def list_bills(user_id: Optional[int] = None) -> List[Bill]:
    q = Bill.query.options(
        joinedload(Bill.user), selectinload(Bill.items).joinedload(BillItem.feed)
    ).filter(Bill.bill_status == BillRecordStatus.ACTIVE)
    if user_id:
        q = q.filter(Bill.user_id == int(user_id))
    return q.order_by(Bill.created_at.desc(), Bill.id.desc()).all()


def get_bill(bill_id: int) -> Bill:
    bill = db.session.get(
        Bill,
        int(bill_id),
        options=[
            joinedload(Bill.user),
            selectinload(Bill.items).joinedload(BillItem.feed),
            selectinload(Bill.transactions),
        ],
    )
    if not bill:
        raise NotFound("Bill not found")
    return bill


def create_bill(
    user_id: int,
    items: List[Dict],
    status=None,
    paid_amount=None,
    clock: Optional[Callable[[], datetime]] = None,
    window_seconds: int = DUPLICATE_WINDOW_SECONDS,
    lookback: int = DUPLICATE_LOOKBACK,
) -> Bill:
    clock = clock or utcnow
    lines = _normalize_lines(items)

    try:
        user = db.session.get(User, int(user_id))
        if not user:
            raise NotFound(f"User with ID {user_id} not found", status_code=400)

        # estimate first; repeated under row locks below
        stock_dao.check_lines(lines)
        total = _calc_total(lines)

        now = clock()
        dup = find_duplicate(user.id, total, lines, now, window_seconds, lookback)
        if dup is not None:
            logger.warning(
                "duplicate bill for user %s rejected, matches %s",
                user.id,
                dup.bill_number,
            )
            raise DuplicateBill(dup.id, dup.bill_number)

        paid, pending, bill_status = settle_amounts(total, status, paid_amount)

        bill = Bill(
            bill_number=next_bill_number(),
            user_id=user.id,
            total_amount=total,
            paid_amount=paid,
            pending_amount=pending,
            status=bill_status,
            bill_status=BillRecordStatus.ACTIVE,
            created_at=now,
        )
        stock_dao.check_lines(lines, lock=True)
        db.session.add(bill)
        db.session.flush()  # need bill.id

        for ln in lines:
            db.session.add(
                BillItem(
                    bill_id=bill.id,
                    feed_id=ln["feed_id"],
                    quantity=ln["quantity"],
                    unit_price=ln["unit_price"],
                    total_price=ln["total_price"],
                    storage_location=ln["storage_location"],
                    stock_source=ln["stock_source"],
                )
            )
            stock_dao.debit(ln["feed_id"], ln["stock_source"], ln["quantity"])

        user.status = UserStatus.ACTIVE
        _commit()
    except AppError:
        db.session.rollback()
        raise
    except IntegrityError as ex:
        db.session.rollback()
        if "bill_number" in str(ex.orig):
            raise BillNumberConflict() from ex
        logger.exception("bill creation failed")
        raise PersistenceFailure() from ex
    except SQLAlchemyError as ex:
        db.session.rollback()
        logger.exception("bill creation failed")
        raise PersistenceFailure() from ex

    logger.info(
        "bill %s created for user %s, total %s", bill.bill_number, user_id, total
    )
    return get_bill(bill.id)


def delete_bill(bill_id: int) -> None:
    """Give every line's quantity back to the counter it was drawn from, then
    drop the bill together with its items and transactions."""
    bill = db.session.get(Bill, int(bill_id), options=[selectinload(Bill.items)])
    if not bill:
        raise NotFound("Bill not found")
    number = bill.bill_number
    try:
        for it in bill.items:
            stock_dao.credit(it.feed_id, it.stock_source, it.quantity)
        db.session.delete(bill)
        _commit()
    except SQLAlchemyError as ex:
        db.session.rollback()
        logger.exception("deleting bill %s failed", number)
        raise PersistenceFailure() from ex
    logger.info("bill %s deleted, stock restored", number)
