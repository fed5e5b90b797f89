"""
storefront/core/security.py

Purpose: Credential and payment-signature checks

- Salted password hashing (passlib, PBKDF2-SHA256)
- Constant-time password verification
- Razorpay payment callback signatures (HMAC-SHA256)
"""

import hashlib
import hmac

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hashes a password with a random salt.
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Checks a submitted password against the stored hash.
    Malformed or empty hashes never verify.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def compute_payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    """
    Signature Razorpay attaches to a checkout callback:
    hex(HMAC-SHA256(secret, "<order_id>|<payment_id>")).
    """
    body = f"{order_id}|{payment_id}"
    return hmac.new(secret.encode("utf-8"), body.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_payment_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    """
    True iff the submitted signature is exactly the expected hex digest.
    """
    expected = compute_payment_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
