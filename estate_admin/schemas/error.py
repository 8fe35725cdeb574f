"""
Error response schemas for consistent API error documentation.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Any, Dict


class ErrorDetail(BaseModel):
    """Single field-level validation problem."""

    field: str = Field(..., description="Dotted path of the offending field", examples=["body -> price"])
    message: str = Field(..., description="What is wrong with it")
    type: Optional[str] = Field(None, description="Validation error type")


class ErrorResponse(BaseModel):
    """Body of every error response."""

    message: str = Field(..., description="Human-readable error message", examples=["Property not found"])
    error_code: str = Field(..., description="Machine-readable error code", examples=["NOT_FOUND"])
    timestamp: str = Field(..., description="UTC time the error was produced")
    request_id: Optional[str] = Field(None, description="Identifier of the failed request")
    details: Optional[List[ErrorDetail]] = Field(None, description="Field-level validation problems")


def _error_response(description: str, message: str, error_code: str) -> Dict[str, Any]:
    return {
        "model": ErrorResponse,
        "description": description,
        "content": {
            "application/json": {
                "example": {
                    "message": message,
                    "error_code": error_code,
                    "timestamp": "2024-01-01T12:00:00Z",
                    "request_id": "a1b2c3d4",
                }
            }
        },
    }


def get_common_error_responses() -> Dict[int, Dict[str, Any]]:
    """OpenAPI error responses shared by every endpoint."""
    return {
        422: _error_response("Validation error", "Request validation failed", "VALIDATION_ERROR"),
        500: _error_response("Internal server error", "Database operation failed", "DATABASE_ERROR"),
    }


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """OpenAPI error responses for endpoints addressing a single document."""
    return {
        404: _error_response("Resource not found", "Property not found with ID: 5f0c...", "NOT_FOUND"),
        502: _error_response("Photo store failure", "Photo upload failed: Invalid image file", "PHOTO_UPLOAD_FAILED"),
        **get_common_error_responses(),
    }
