"""Health check endpoint for the referral API."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from referral_registry import __version__
from referral_registry.api.dependencies import ReferralServiceDep
from referral_registry.models.health import HealthResponse, RegistryHealth

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(service: ReferralServiceDep) -> HealthResponse:
    """Health check endpoint.

    Used by monitoring tools and load balancers. Reports how many referrals
    the registry holds; no referral content is exposed.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        referrals=RegistryHealth(count=service.count()),
    )
