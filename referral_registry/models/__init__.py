"""API response models."""

from referral_registry.models.health import HealthResponse, RegistryHealth
