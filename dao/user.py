# dao/user.py
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from configs import db
from dao import stock as stock_dao
from db.models.bill import Bill, BillItem, BillRecordStatus
from db.models.user import USER_CODE_PREFIX, User, UserStatus, UserType
from utils.errors import NotFound, ValidationError

logger = logging.getLogger(__name__)

_TYPE_FROM_FORM = {t.value.lower(): t for t in UserType}
_STATUS_FROM_FORM = {s.value: s for s in UserStatus}


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


def _to_user_type(v) -> UserType:
    if not v:
        return UserType.BMC
    if isinstance(v, UserType):
        return v
    t = _TYPE_FROM_FORM.get(str(v).strip().lower())
    if t is None:
        raise ValidationError(
            details=[{"field": "userType", "message": f"Unknown user type '{v}'"}]
        )
    return t


def _to_user_status(v) -> UserStatus:
    if not v:
        return UserStatus.ACTIVE
    if isinstance(v, UserStatus):
        return v
    s = _STATUS_FROM_FORM.get(str(v).strip().lower())
    if s is None:
        raise ValidationError(
            details=[{"field": "status", "message": f"Unknown status '{v}'"}]
        )
    return s


def _field_error(field: str, message: str) -> ValidationError:
    return ValidationError(message, details=[{"field": field, "message": message}])


def generate_user_code(user_type: UserType) -> str:
    """PREFIX-NNNN from the user count, bumped until it is free."""
    prefix = USER_CODE_PREFIX[user_type]
    n = (db.session.query(func.count(User.id)).scalar() or 0) + 1
    code = f"{prefix}-{n:04d}"
    while User.query.filter_by(user_code=code).first() is not None:
        n += 1
        code = f"{prefix}-{n:04d}"
    return code


def list_users(user_type: Optional[str] = None) -> List[dict]:
    q = User.query
    if user_type:
        q = q.filter(User.user_type == _to_user_type(user_type))
    pending = {
        uid: Decimal(str(total or 0))
        for (uid, total) in db.session.query(
            Bill.user_id, func.sum(Bill.pending_amount)
        )
        .filter(Bill.bill_status == BillRecordStatus.ACTIVE)
        .group_by(Bill.user_id)
        .all()
    }
    rows = []
    for u in q.order_by(User.created_at.desc(), User.id.desc()).all():
        data = u.to_dict()
        data["totalPending"] = float(pending.get(u.id, 0))
        rows.append(data)
    return rows


def get_user(user_id: int) -> User:
    user = db.session.get(
        User,
        int(user_id),
        options=[
            selectinload(User.bills)
            .selectinload(Bill.items)
            .joinedload(BillItem.feed),
            selectinload(User.transactions),
        ],
    )
    if not user:
        raise NotFound("User not found")
    return user


def _ensure_unique(mobile_no: str, user_code: Optional[str], exclude_id=None):
    q = User.query.filter(User.mobile_no == mobile_no)
    if exclude_id is not None:
        q = q.filter(User.id != exclude_id)
    if q.first() is not None:
        raise _field_error("mobileNo", "Mobile number already exists")
    if user_code:
        q = User.query.filter(User.user_code == user_code)
        if exclude_id is not None:
            q = q.filter(User.id != exclude_id)
        if q.first() is not None:
            raise _field_error("userCode", "User code already exists")


def _commit_user():
    try:
        _commit()
    except IntegrityError as ex:
        msg = str(ex.orig)
        if "user_code" in msg:
            raise _field_error("userCode", "User code already exists") from ex
        if "mobile_no" in msg:
            raise _field_error("mobileNo", "Mobile number already exists") from ex
        raise


def create_user(
    name: str,
    mobile_no: str,
    address: Optional[str] = None,
    email: Optional[str] = None,
    user_code: Optional[str] = None,
    user_type=None,
    status=None,
) -> User:
    utype = _to_user_type(user_type)
    _ensure_unique(mobile_no, user_code)
    user = User(
        user_code=user_code or generate_user_code(utype),
        name=name.strip(),
        mobile_no=mobile_no.strip(),
        address=address or None,
        email=email or None,
        user_type=utype,
        status=_to_user_status(status),
    )
    db.session.add(user)
    _commit_user()
    logger.info("user %s created", user.user_code)
    return user


def update_user(
    user_id: int,
    name: str,
    mobile_no: str,
    address: Optional[str] = None,
    email: Optional[str] = None,
    user_code: Optional[str] = None,
    user_type=None,
    status=None,
) -> User:
    user = db.session.get(User, int(user_id))
    if not user:
        raise NotFound("User not found")
    _ensure_unique(mobile_no, user_code, exclude_id=user.id)

    user.name = name.strip()
    user.mobile_no = mobile_no.strip()
    user.address = address or None
    user.email = email or None
    if user_code and user_code != user.user_code:
        user.user_code = user_code
    if user_type:
        user.user_type = _to_user_type(user_type)
    if status:
        user.status = _to_user_status(status)
    _commit_user()
    return user


def delete_user(user_id: int) -> None:
    """Drop the user with all bills, returning their stock first."""
    user = db.session.get(
        User, int(user_id), options=[selectinload(User.bills).selectinload(Bill.items)]
    )
    if not user:
        raise NotFound("User not found")
    try:
        for bill in user.bills:
            for it in bill.items:
                stock_dao.credit(it.feed_id, it.stock_source, it.quantity)
        db.session.delete(user)
        _commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    logger.info("user %s deleted", user_id)
