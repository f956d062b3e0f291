# dao/payment.py
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from configs import db
from dao import bill as bill_dao
from db.models.bill import Bill, BillRecordStatus
from db.models.transaction import Transaction
from utils.errors import (
    AmountExceedsPending,
    AppError,
    NotFound,
    PersistenceFailure,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _d(x):
    return Decimal(str(x or 0))


def list_transactions(bill_id: Optional[int] = None) -> List[Transaction]:
    q = Transaction.query
    if bill_id:
        q = q.filter(Transaction.bill_id == int(bill_id))
    return q.order_by(Transaction.created_at.desc(), Transaction.id.desc()).all()


def record_payment(bill_id: int, amount, description: Optional[str] = None) -> Transaction:
    """
    Apply `amount` against the bill's pending balance. The ledger entry and
    the bill update are committed together.
    """
    amount = bill_dao._money(amount)
    if amount <= 0:
        raise ValidationError(
            details=[{"field": "amount", "message": "Amount must be positive"}]
        )

    try:
        bill = (
            db.session.query(Bill)
            .filter(Bill.id == int(bill_id))
            .with_for_update()
            .populate_existing()
            .one_or_none()
        )
        if not bill or bill.bill_status != BillRecordStatus.ACTIVE:
            raise NotFound("Bill not found")

        pending = _d(bill.pending_amount)
        if amount > pending:
            raise AmountExceedsPending(amount, pending)

        tx = Transaction(
            user_id=bill.user_id,
            bill_id=bill.id,
            amount=amount,
            type="payment",
            description=description or f"Payment for {bill.bill_number}",
        )
        db.session.add(tx)

        bill.paid_amount = _d(bill.paid_amount) + amount
        bill.pending_amount = pending - amount
        bill.status = bill_dao.derive_status(bill.total_amount, bill.paid_amount)
        bill_dao._commit()
    except AppError:
        db.session.rollback()
        raise
    except SQLAlchemyError as ex:
        db.session.rollback()
        logger.exception("payment against bill %s failed", bill_id)
        raise PersistenceFailure() from ex

    logger.info(
        "payment %s recorded on %s, pending now %s",
        amount,
        bill.bill_number,
        bill.pending_amount,
    )
    return tx
