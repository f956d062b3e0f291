# dao/admin.py
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from configs import db
from db.models.admin import Admin


def get_admin(admin_id: int) -> Optional[Admin]:
    return db.session.get(Admin, int(admin_id))


def authenticate(mobile_no: str, password: str) -> Optional[Admin]:
    admin = Admin.query.filter_by(mobile_no=(mobile_no or "").strip()).first()
    if not admin or not check_password_hash(admin.password_hash, password or ""):
        return None
    return admin


def create_or_update_admin(mobile_no: str, password: str, name: str = "Admin") -> Admin:
    admin = Admin.query.filter_by(mobile_no=mobile_no).first()
    if admin is None:
        admin = Admin(mobile_no=mobile_no)
        db.session.add(admin)
    admin.name = name
    admin.password_hash = generate_password_hash(password)
    admin.is_active = True
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return admin
