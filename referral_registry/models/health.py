"""Health check models for the referral API."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field


class RegistryHealth(BaseModel):
    """Registry status.

    Attributes:
        storage: Storage backend name
        count: Number of referrals currently held
    """
    storage: str = Field(default="memory", description="Storage backend")
    count: int = Field(..., ge=0, description="Number of stored referrals")


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Overall system status
        timestamp: Current timestamp
        version: Application version
        referrals: Registry information
    """
    status: Literal["healthy", "unhealthy"]
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Current UTC timestamp"
    )
    version: str = Field(..., description="Application version")
    referrals: RegistryHealth
