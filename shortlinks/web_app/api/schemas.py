"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten", min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
            ]
        }
    }


class LinkResponse(BaseModel):
    """A short link as shown to its owner."""

    short_code: str = Field(..., description="The generated short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The original long URL")
    click_count: int = Field(..., description="Number of successful redirects")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "short_code": "ab12cd",
                    "short_url": "https://short.link/ab12cd",
                    "original_url": "https://example.com/very/long/path",
                    "click_count": 0,
                    "created_at": "2024-01-01T12:00:00Z",
                }
            ]
        }
    }


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")
