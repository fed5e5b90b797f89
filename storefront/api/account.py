"""
storefront/api/account.py

Purpose: Account endpoints under /api

- Purchase history (/api/get-hashrate)
- Password change
- Balance-funded product purchase
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from storefront.api.deps import get_user_service
from storefront.schemas.account import (
    BuyProductRequest,
    BuyProductResponse,
    MessageResponse,
    PurchasesResponse,
    UpdateProfileRequest,
)
from storefront.services.user_service import UserService

router = APIRouter(prefix="/api", tags=["Account"])


@router.get("/get-hashrate", response_model=PurchasesResponse)
async def get_hashrate(
    phone_number: Optional[str] = Query(default=None, alias="phoneNumber"),
    users: UserService = Depends(get_user_service),
):
    """Products the user has bought, oldest first."""
    return {"purchases": await users.get_purchases(phone_number)}


@router.put("/update-profile", response_model=MessageResponse)
async def update_profile(body: UpdateProfileRequest, users: UserService = Depends(get_user_service)):
    await users.update_password(body.phone_number, body.current_password, body.new_password)
    return {"message": "Password updated successfully!"}


@router.post("/buy-product", response_model=BuyProductResponse)
async def buy_product(body: BuyProductRequest, users: UserService = Depends(get_user_service)):
    new_balance = await users.buy_product(body.phone_number, body.product_data)
    return {"success": True, "newBalance": float(new_balance)}
