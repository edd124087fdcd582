"""Storage adapters for the referral registry.

This module contains storage adapters that implement the ReferralStoragePort
interface.
"""

from referral_registry.adapters.storage.memory_adapter import InMemoryReferralAdapter

__all__ = ["InMemoryReferralAdapter"]
