# db/models/user.py
import enum
from configs import db
from utils.clock import utcnow


class UserType(enum.Enum):
    BMC = "BMC"
    DABHADI = "Dabhadi"
    CUSTOMER = "Customer"


# prefix of the auto-generated user code per category
USER_CODE_PREFIX = {
    UserType.BMC: "BMC",
    UserType.DABHADI: "DAB",
    UserType.CUSTOMER: "CUS",
}


class UserStatus(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class User(db.Model):
    """A customer of the shop (BMC centre, Dabhadi or walk-in customer)."""

    __tablename__ = "customer"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_code = db.Column(db.String(20), unique=True, nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    mobile_no = db.Column(db.String(15), unique=True, nullable=False)
    address = db.Column(db.Text)
    email = db.Column(db.String(255))
    user_type = db.Column(
        db.Enum(UserType, name="usertype"), default=UserType.BMC, nullable=False
    )
    status = db.Column(
        db.Enum(UserStatus, name="userstatus"),
        default=UserStatus.ACTIVE,
        nullable=False,
    )
    created_at = db.Column(db.DateTime, default=utcnow)

    bills = db.relationship(
        "Bill",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Bill.created_at.desc()",
    )
    transactions = db.relationship(
        "Transaction",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Transaction.created_at.desc()",
    )

    def __str__(self):
        return f"{self.user_code} {self.name}"

    def to_dict(self):
        return {
            "id": self.id,
            "userCode": self.user_code,
            "name": self.name,
            "mobileNo": self.mobile_no,
            "address": self.address,
            "email": self.email,
            "userType": self.user_type.value if self.user_type else None,
            "status": self.status.value if self.status else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
