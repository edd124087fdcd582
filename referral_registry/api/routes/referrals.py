"""Referral endpoints.

Three operations over the registry: list every referral, fetch one by id,
and create a new one. Their public documentation lives in
``referral_registry.api.openapi_spec``, not in these handlers.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse

from referral_registry.api.dependencies import ReferralServiceDep
from referral_registry.domain.referral import ReferralCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/referrals", tags=["referrals"])


@router.get("")
async def list_referrals(service: ReferralServiceDep) -> JSONResponse:
    """Return all referrals in creation order (``[]`` when empty)."""
    referrals = service.list_referrals()
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=[referral.to_response() for referral in referrals],
    )


@router.get("/{referral_id}")
async def get_referral(referral_id: int, service: ReferralServiceDep) -> JSONResponse:
    """Return one referral.

    Raises:
        ReferralNotFoundError: Turned into a 404 by the registered exception handler
    """
    referral = service.get_referral(referral_id)
    return JSONResponse(status_code=status.HTTP_200_OK, content=referral.to_response())


@router.post("")
async def create_referral(
    service: ReferralServiceDep,
    payload: Optional[ReferralCreate] = Body(None),
) -> JSONResponse:
    """Store a referral and return it with its assigned id.

    No field is required. An empty request body creates an empty referral.
    """
    referral = service.create_referral(payload or ReferralCreate())
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=referral.to_response())
