"""Domain Ports - Abstract Contracts for Referral Storage.

This module defines the Port interface that storage adapters must implement
and the exception hierarchy shared by the domain and the API layer.

Architecture:
    - Pure abstract interfaces with zero infrastructure dependencies
    - Adapters (in-memory today) implement these ports
    - The service layer depends on the port, never on a concrete adapter
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from referral_registry.domain.referral import Referral


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class RegistryError(Exception):
    """Base exception for all referral registry errors."""
    pass


class ReferralNotFoundError(RegistryError):
    """Raised when no stored referral has the requested identifier.

    Attributes:
        referral_id: The identifier that was looked up
    """

    message = "Referral not found"

    def __init__(self, referral_id: int):
        super().__init__(self.message)
        self.referral_id = referral_id


class ConfigurationError(RegistryError):
    """Raised when server configuration is missing or invalid.

    Attributes:
        setting: Name of the offending setting, if known
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(message)
        self.setting = setting


# ============================================================================
# Storage Port
# ============================================================================

class ReferralStoragePort(ABC):
    """Abstract contract for referral storage adapters.

    Key Principles:
        - Append-only: records are never updated or removed
        - Identifiers are assigned by the adapter, starting at 1, never reused
        - ``list_all`` returns records in insertion order
    """

    @abstractmethod
    def add(self, data: dict[str, Any]) -> Referral:
        """Assign the next identifier to ``data`` and append it.

        Parameters:
            data: Referral fields as supplied by the caller (no ``id``)

        Returns:
            Referral: The stored record, including its new ``id``
        """
        pass

    @abstractmethod
    def get(self, referral_id: int) -> Optional[Referral]:
        """Return the stored referral with ``referral_id``, or None."""
        pass

    @abstractmethod
    def list_all(self) -> list[Referral]:
        """Return every stored referral in insertion order."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored referrals."""
        pass
