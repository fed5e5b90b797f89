"""
storefront/api/deps.py

Request-scoped access to the objects built at startup (app.state).
"""

from fastapi import Request

from storefront.core.config import Settings
from storefront.db.store import Store
from storefront.services.payment_service import PaymentService
from storefront.services.user_service import UserService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_user_service(request: Request) -> UserService:
    return UserService(
        request.app.state.store,
        min_password_length=request.app.state.settings.MIN_PASSWORD_LENGTH,
    )


def get_payment_service(request: Request) -> PaymentService:
    return PaymentService(
        request.app.state.store,
        request.app.state.gateway,
        key_secret=request.app.state.settings.RAZORPAY_KEY_SECRET,
    )
