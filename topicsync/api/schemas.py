"""Pydantic schemas for API request/response models."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error response schema."""

    code: str
    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
