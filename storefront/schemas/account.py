"""
storefront/schemas/account.py

Pydantic models for the account endpoints.
Fields are optional at the schema level so missing values get the
endpoint-specific messages raised by UserService.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class RegisterRequest(BaseModel):
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    password: Optional[str] = None
    invitation_code: Optional[str] = Field(default=None, alias="invitationCode")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "phoneNumber": "9876543210",
                "password": "s3cretpass",
                "invitationCode": "FW2024"
            }
        }


class LoginRequest(BaseModel):
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    password: Optional[str] = None

    class Config:
        populate_by_name = True


class UpdateProfileRequest(BaseModel):
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    current_password: Optional[str] = Field(default=None, alias="currentPassword")
    new_password: Optional[str] = Field(default=None, alias="newPassword")

    class Config:
        populate_by_name = True


class BuyProductRequest(BaseModel):
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    product_data: Optional[Dict[str, Any]] = Field(default=None, alias="productData")

    class Config:
        populate_by_name = True


class MessageResponse(BaseModel):
    message: str


class UserSummary(BaseModel):
    """Public view of a user. Never carries password material."""
    phoneNumber: str
    balance: float


class LoginResponse(BaseModel):
    message: str
    user: UserSummary


class PurchasesResponse(BaseModel):
    purchases: List[Dict[str, Any]]


class BuyProductResponse(BaseModel):
    success: bool = True
    newBalance: float
