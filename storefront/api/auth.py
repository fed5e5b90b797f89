"""
storefront/api/auth.py

Purpose: Registration, login and logout

- Stateless: login returns the public user view, no session or token
"""

from fastapi import APIRouter, Depends, status

from storefront.api.deps import get_user_service
from storefront.core.logging import get_logger
from storefront.schemas.account import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
)
from storefront.services.user_service import UserService

logger = get_logger(__name__)
router = APIRouter(tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
async def register(body: RegisterRequest, users: UserService = Depends(get_user_service)):
    await users.register(body.phone_number, body.password, body.invitation_code)
    return {"message": "User registered successfully! Please log in."}


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, users: UserService = Depends(get_user_service)):
    user = await users.authenticate(body.phone_number, body.password)
    return {"message": "Login successful!", "user": user.public_view()}


@router.post("/logout", response_model=MessageResponse)
async def logout():
    logger.info("User logged out.")
    return {"message": "Logout successful."}
