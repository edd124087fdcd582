"""Adapters for the referral registry."""
