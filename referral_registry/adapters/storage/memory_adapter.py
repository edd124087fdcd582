"""In-Memory Storage Adapter.

This adapter implements the ReferralStoragePort contract with a plain Python
list held for the lifetime of the process. Nothing is written to disk; a
restart empties the registry.

Architecture:
    - Implements ReferralStoragePort (Hexagonal Architecture)
    - Id assignment and append happen under one lock, so concurrent
      requests never share an id and every id appears in the list once
    - Reads return copies so callers cannot mutate stored records
"""

import logging
from threading import Lock
from typing import Any, Optional

from referral_registry.domain.ports import ReferralStoragePort
from referral_registry.domain.referral import Referral

logger = logging.getLogger(__name__)


class InMemoryReferralAdapter(ReferralStoragePort):
    """Process-local, append-only referral store.

    Example Usage:
        ```python
        adapter = InMemoryReferralAdapter()
        referral = adapter.add({"patient": {"name": "Jane Smith"}})
        assert referral.id == 1
        assert adapter.get(1) == referral
        ```
    """

    def __init__(self):
        self._referrals: list[Referral] = []
        self._index: dict[int, Referral] = {}
        self._next_id = 1
        self._lock = Lock()

    def add(self, data: dict[str, Any]) -> Referral:
        """Assign the next id to ``data`` and append it.

        Parameters:
            data: Referral fields supplied by the caller; an ``id`` key is overwritten

        Returns:
            Referral: Copy of the stored record
        """
        with self._lock:
            referral = Referral.model_validate({**data, "id": self._next_id})
            self._next_id += 1
            self._referrals.append(referral)
            self._index[referral.id] = referral

        logger.debug(f"Stored referral {referral.id} (total: {len(self._referrals)})")
        return referral.model_copy(deep=True)

    def get(self, referral_id: int) -> Optional[Referral]:
        with self._lock:
            referral = self._index.get(referral_id)
            return referral.model_copy(deep=True) if referral is not None else None

    def list_all(self) -> list[Referral]:
        with self._lock:
            return [referral.model_copy(deep=True) for referral in self._referrals]

    def count(self) -> int:
        with self._lock:
            return len(self._referrals)
