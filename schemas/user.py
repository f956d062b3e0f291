from typing import Literal, Optional, Union

from pydantic import EmailStr, Field

from schemas.base import BaseInputSchema

UserTypeName = Literal["BMC", "Dabhadi", "Customer"]
UserStatusName = Literal["active", "inactive"]


class UserIn(BaseInputSchema):
    name: str = Field(..., min_length=1)
    mobile_no: str = Field(..., min_length=10, max_length=15)
    address: Optional[str] = None
    email: Optional[Union[EmailStr, Literal[""]]] = None
    user_code: Optional[str] = None  # generated when missing
    user_type: UserTypeName = "BMC"
    status: UserStatusName = "active"


class UserUpdate(UserIn):
    """Same fields as UserIn; type and status stay unchanged when omitted."""

    user_type: Optional[UserTypeName] = None
    status: Optional[UserStatusName] = None
