from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import Field

from schemas.base import BaseInputSchema


class BillItemIn(BaseInputSchema):
    feed_id: int
    quantity: Decimal = Field(..., gt=0, decimal_places=3)
    unit_price: Decimal = Field(..., ge=0, decimal_places=2)
    storage_location: Optional[str] = None


class BillIn(BaseInputSchema):
    user_id: int
    items: List[BillItemIn] = Field(..., min_length=1)
    status: Optional[Literal["pending", "partial", "paid"]] = None
    paid_amount: Optional[Decimal] = Field(None, ge=0, decimal_places=2)


class PaymentIn(BaseInputSchema):
    bill_id: int
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    description: Optional[str] = None
