from pydantic import Field

from schemas.base import BaseInputSchema


class LoginRequest(BaseInputSchema):
    mobile_no: str = Field(..., min_length=10, max_length=15)
    password: str = Field(..., min_length=6)
