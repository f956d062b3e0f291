from decimal import Decimal
from typing import Optional

from pydantic import Field

from schemas.base import BaseInputSchema


class FeedIn(BaseInputSchema):
    name: str = Field(..., min_length=1)
    brand: Optional[str] = None
    weight: Decimal = Field(..., gt=0, decimal_places=2, description="kg per bag")
    default_price: Decimal = Field(..., ge=0, decimal_places=2)
    stock: Optional[Decimal] = Field(None, ge=0, decimal_places=3)
    shop_stock: Optional[Decimal] = Field(None, ge=0, decimal_places=3)
    godown_stock: Optional[Decimal] = Field(None, ge=0, decimal_places=3)
