"""
Error response models.

Standardized error envelope for the API.
"""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format: `{success: false, error}`."""

    success: bool = False
    error: str
