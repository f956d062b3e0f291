# db/models/bill.py
import enum
from configs import db
from utils.clock import utcnow


class BillStatus(enum.Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class BillRecordStatus(enum.Enum):
    ACTIVE = "active"
    VOID = "void"


class StorageLocation:
    SHOP = "shop"
    GODOWN = "godown"
    # stock_source value when a sale drew on the aggregate counter only
    LEGACY = "legacy"


class Bill(db.Model):
    __tablename__ = "bill"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    bill_number = db.Column(db.String(20), unique=True, nullable=False, index=True)

    user_id = db.Column(
        db.Integer, db.ForeignKey("customer.id", ondelete="CASCADE"), nullable=False
    )
    user = db.relationship("User", back_populates="bills")

    total_amount = db.Column(db.Numeric(18, 2), default=0, nullable=False)
    paid_amount = db.Column(db.Numeric(18, 2), default=0, nullable=False)
    pending_amount = db.Column(db.Numeric(18, 2), default=0, nullable=False)
    status = db.Column(
        db.Enum(BillStatus, name="billstatus"),
        default=BillStatus.PENDING,
        nullable=False,
    )
    bill_status = db.Column(
        db.Enum(BillRecordStatus, name="billrecordstatus"),
        default=BillRecordStatus.ACTIVE,
        nullable=False,
    )
    created_at = db.Column(db.DateTime, default=utcnow, index=True)

    items = db.relationship(
        "BillItem",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="BillItem.id",
    )
    transactions = db.relationship(
        "Transaction",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="Transaction.created_at.desc()",
    )

    def __str__(self):
        return self.bill_number

    def to_dict(self, with_items=True, with_transactions=False):
        data = {
            "id": self.id,
            "billNumber": self.bill_number,
            "userId": self.user_id,
            "totalAmount": float(self.total_amount or 0),
            "paidAmount": float(self.paid_amount or 0),
            "pendingAmount": float(self.pending_amount or 0),
            "status": self.status.value if self.status else None,
            "billStatus": self.bill_status.value if self.bill_status else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if self.user is not None:
            data["user"] = {
                "id": self.user.id,
                "userCode": self.user.user_code,
                "name": self.user.name,
                "mobileNo": self.user.mobile_no,
                "userType": self.user.user_type.value,
                "status": self.user.status.value,
            }
        if with_items:
            data["items"] = [it.to_dict() for it in self.items]
        if with_transactions:
            data["transactions"] = [t.to_dict() for t in self.transactions]
        return data


class BillItem(db.Model):
    __tablename__ = "bill_item"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    bill_id = db.Column(
        db.Integer, db.ForeignKey("bill.id", ondelete="CASCADE"), nullable=False
    )
    feed_id = db.Column(db.Integer, db.ForeignKey("feed.id"), nullable=False)

    quantity = db.Column(db.Numeric(18, 3), nullable=False)
    unit_price = db.Column(db.Numeric(18, 2), nullable=False)
    total_price = db.Column(db.Numeric(18, 2), nullable=False)
    storage_location = db.Column(
        db.String(60), default=StorageLocation.GODOWN, nullable=False
    )
    stock_source = db.Column(
        db.String(10), default=StorageLocation.GODOWN, nullable=False
    )

    bill = db.relationship("Bill", back_populates="items")
    feed = db.relationship("Feed", backref="bill_items")

    def to_dict(self):
        return {
            "id": self.id,
            "feedId": self.feed_id,
            "feed": (
                {
                    "id": self.feed.id,
                    "name": self.feed.name,
                    "brand": self.feed.brand,
                    "weight": float(self.feed.weight or 0),
                }
                if self.feed is not None
                else None
            ),
            "quantity": float(self.quantity or 0),
            "unitPrice": float(self.unit_price or 0),
            "totalPrice": float(self.total_price or 0),
            "storageLocation": self.storage_location,
        }
