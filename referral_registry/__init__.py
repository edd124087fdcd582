"""Referral Registry: in-memory HTTP service for medical referral records."""

__version__ = "1.0.0"
