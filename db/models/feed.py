# db/models/feed.py
import enum
from configs import db
from utils.clock import utcnow


class FeedStatus(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Feed(db.Model):
    __tablename__ = "feed"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False)
    brand = db.Column(db.String(120))
    weight = db.Column(db.Numeric(10, 2), nullable=False)  # kg per bag
    default_price = db.Column(db.Numeric(18, 2), default=0, nullable=False)

    shop_stock = db.Column(db.Numeric(18, 3), default=0, nullable=False)
    godown_stock = db.Column(db.Numeric(18, 3), default=0, nullable=False)
    # legacy aggregate, mirrors every location debit/credit
    stock = db.Column(db.Numeric(18, 3), default=0, nullable=False)

    status = db.Column(
        db.Enum(FeedStatus, name="feedstatus"),
        default=FeedStatus.ACTIVE,
        nullable=False,
    )
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def __str__(self):
        return self.label

    @property
    def label(self) -> str:
        brand = f" ({self.brand})" if self.brand else ""
        return f"{self.name}{brand} - {float(self.weight or 0):g}kg"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "weight": float(self.weight or 0),
            "defaultPrice": float(self.default_price or 0),
            "shopStock": float(self.shop_stock or 0),
            "godownStock": float(self.godown_stock or 0),
            "stock": float(self.stock or 0),
            "status": self.status.value if self.status else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
