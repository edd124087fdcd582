"""Domain services for the referral registry."""

import logging

from referral_registry.domain.ports import ReferralNotFoundError, ReferralStoragePort
from referral_registry.domain.referral import Referral, ReferralCreate

logger = logging.getLogger(__name__)


class ReferralService:
    """Create, look up and list referrals over a storage port.

    Patient details are never logged; log lines carry referral ids only.

    Parameters:
        storage: Storage adapter the registry reads from and appends to
    """

    def __init__(self, storage: ReferralStoragePort):
        self.storage = storage

    def list_referrals(self) -> list[Referral]:
        """Return all referrals in the order they were created."""
        return self.storage.list_all()

    def get_referral(self, referral_id: int) -> Referral:
        """Return the referral with ``referral_id``.

        Raises:
            ReferralNotFoundError: If no referral has that id
        """
        referral = self.storage.get(referral_id)
        if referral is None:
            logger.info(f"Referral {referral_id} not found")
            raise ReferralNotFoundError(referral_id)
        return referral

    def create_referral(self, payload: ReferralCreate) -> Referral:
        """Store ``payload`` under a newly assigned id.

        Any ``id`` present in the payload is discarded.
        """
        referral = self.storage.add(payload.to_record_data())
        logger.info(f"Created referral {referral.id}")
        return referral

    def count(self) -> int:
        return self.storage.count()
