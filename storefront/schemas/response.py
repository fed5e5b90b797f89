from pydantic import BaseModel
from typing import Optional, Any

class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    status: str = "failure"
    error: str
    message: str
    code: str
    details: Optional[Any] = None
