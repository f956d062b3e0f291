# db/models/transaction.py
from configs import db
from utils.clock import utcnow


class Transaction(db.Model):
    """Append-only payment ledger entry."""

    __tablename__ = "payment_transaction"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("customer.id", ondelete="CASCADE"), nullable=False
    )
    bill_id = db.Column(
        db.Integer, db.ForeignKey("bill.id", ondelete="CASCADE"), nullable=False
    )
    amount = db.Column(db.Numeric(18, 2), nullable=False)
    type = db.Column(db.String(30), default="payment", nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=utcnow)

    user = db.relationship("User", back_populates="transactions")
    bill = db.relationship("Bill", back_populates="transactions")

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "billId": self.bill_id,
            "amount": float(self.amount or 0),
            "type": self.type,
            "description": self.description,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
