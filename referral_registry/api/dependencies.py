"""Dependency injection for the referral API.

This module provides dependency injection functions for FastAPI, following
Hexagonal Architecture principles: routes receive a ReferralService, and the
service receives whichever storage adapter is configured.
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from referral_registry.adapters.storage import InMemoryReferralAdapter
from referral_registry.domain.ports import ReferralStoragePort
from referral_registry.domain.services import ReferralService

logger = logging.getLogger(__name__)


@lru_cache()
def get_storage_adapter() -> ReferralStoragePort:
    """Get the storage adapter instance (cached).

    The registry lives in process memory, so the adapter must be created
    exactly once and shared by every request. Tests override this
    dependency to get a fresh, empty registry.

    Returns:
        ReferralStoragePort: The process-wide storage adapter
    """
    logger.debug("Creating in-memory referral registry")
    return InMemoryReferralAdapter()


# Type aliases for dependency injection
StorageDep = Annotated[ReferralStoragePort, Depends(get_storage_adapter)]


def get_referral_service(storage: StorageDep) -> ReferralService:
    return ReferralService(storage)


ReferralServiceDep = Annotated[ReferralService, Depends(get_referral_service)]
