from pydantic import BaseModel
from typing import Optional, Any, Dict, List

class ErrorDetail(BaseModel):
    """Individual error detail for validation errors"""
    loc: List[Any]  # Location of the error (field path)
    msg: str        # Error message
    type: str       # Error type
    ctx: Optional[Dict[str, Any]] = None  # Additional context

class ValidationErrorResponse(BaseModel):
    """Response schema for validation errors (422)"""
    message: str = "Validation failed"
    error_code: str = "VALIDATION_ERROR"
    errors: Optional[List[ErrorDetail]] = None
    timestamp: str
    path: str
    request_id: Optional[str] = None

class AuthErrorResponse(BaseModel):
    """Response schema for authentication errors (401)"""
    message: str = "Authentication required"
    error_code: str = "HTTP_ERROR"
    timestamp: str
    path: str
    request_id: Optional[str] = None

class ForbiddenErrorResponse(BaseModel):
    """Response schema for ownership errors (403)"""
    message: str
    error_code: str = "INSUFFICIENT_PERMISSIONS"
    timestamp: str
    path: str
    request_id: Optional[str] = None

class NotFoundErrorResponse(BaseModel):
    """Response schema for resource not found errors (404)"""
    message: str = "Resource not found"
    error_code: str = "RESOURCE_NOT_FOUND"
    timestamp: str
    path: str
    request_id: Optional[str] = None

class ConflictErrorResponse(BaseModel):
    """Response schema for duplicate ballots (409)"""
    message: str
    error_code: str = "ALREADY_VOTED"
    poll_id: Optional[int] = None
    timestamp: str
    path: str
    request_id: Optional[str] = None

class ServerErrorResponse(BaseModel):
    """Response schema for internal server errors (500)"""
    message: str = "Internal server error"
    error_code: str = "INTERNAL_ERROR"
    hint: Optional[str] = None
    timestamp: str
    path: str
    request_id: Optional[str] = None
