from typing import Optional, Any

class StorefrontError(Exception):
    """
    Base exception for the storefront application.
    """
    error = "Server Error"

    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ConfigurationError(StorefrontError):
    """
    Raised on startup when required settings are missing.
    """
    error = "Configuration Error"

    def __init__(self, message: str = "Invalid configuration", details: Optional[Any] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", status_code=500, details=details)

class ValidationError(StorefrontError):
    """
    Raised when input validation fails.
    """
    error = "Bad Request"

    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)

class AuthenticationError(StorefrontError):
    """
    Raised when a password check fails.
    """
    error = "Unauthorized"

    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class InvalidSignatureError(StorefrontError):
    """
    Raised when a payment callback signature does not match.
    """
    error = "Invalid Signature"

    def __init__(self, message: str = "Invalid signature.", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_SIGNATURE", status_code=400, details=details)

class InsufficientBalanceError(StorefrontError):
    """
    Raised when a balance-funded purchase exceeds the user's balance.
    """
    error = "Payment Required"

    def __init__(self, message: str = "Insufficient balance.", details: Optional[Any] = None):
        super().__init__(message, code="INSUFFICIENT_BALANCE", status_code=402, details=details)

class ResourceNotFoundError(StorefrontError):
    """
    Raised when a requested resource is not found.
    """
    error = "Not Found"

    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class ConflictError(StorefrontError):
    """
    Raised when creating a resource whose key already exists.
    """
    error = "Conflict"

    def __init__(self, message: str = "Resource already exists", details: Optional[Any] = None):
        super().__init__(message, code="CONFLICT", status_code=409, details=details)

class PaymentGatewayError(StorefrontError):
    """
    Raised when the payment gateway rejects a request or cannot be reached.
    Carries the gateway's status code when it reported one.
    """
    error = "Payment Gateway Error"

    def __init__(self, message: str = "An unexpected error occurred.", status_code: int = 500, details: Optional[Any] = None):
        super().__init__(message, code="PAYMENT_GATEWAY_ERROR", status_code=status_code, details=details)
