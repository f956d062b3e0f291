# db/models/admin.py
from configs import db
from flask_login import UserMixin
from utils.clock import utcnow


class Admin(db.Model, UserMixin):
    __tablename__ = "admin"

    id = db.Column(db.Integer, primary_key=True)
    mobile_no = db.Column(db.String(15), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120))
    password_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def get_id(self):
        return str(self.id)

    def to_dict(self):
        return {"id": self.id, "mobileNo": self.mobile_no, "name": self.name}
