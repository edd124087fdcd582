"""Domain core: referral models, storage port and services."""

from referral_registry.domain.referral import Patient, Referral, ReferralCreate, Referrer
from referral_registry.domain.ports import (
    ConfigurationError,
    ReferralNotFoundError,
    ReferralStoragePort,
    RegistryError,
)
from referral_registry.domain.services import ReferralService
