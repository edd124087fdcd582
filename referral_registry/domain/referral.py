"""Referral Record Schema Definitions.

This module defines the data models for medical referrals: the referring
practice, the patient, and the referral itself.

Architecture:
    - Pure domain models with zero infrastructure dependencies
    - Every field is optional; unknown fields are kept as-is so the registry
      stores whatever the caller supplied
    - Wire names are camelCase, matching the JSON API
"""

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def contains_non_finite(value: Any) -> bool:
    """True if ``value`` holds NaN or +/-Infinity at any depth.

    JSON has no encoding for these, so a record holding one could be stored
    but never served back.
    """
    if isinstance(value, float):
        return math.isnan(value) or math.isinf(value)
    if isinstance(value, dict):
        return any(contains_non_finite(item) for item in value.values())
    if isinstance(value, (list, tuple)):
        return any(contains_non_finite(item) for item in value)
    return False


class OpenRecord(BaseModel):
    """Base for referral models: unknown fields are kept, but must be JSON-encodable."""

    model_config = ConfigDict(extra="allow")

    @model_validator(mode="after")
    def reject_non_finite_numbers(self) -> "OpenRecord":
        # Nested OpenRecord fields have already run this check themselves
        values = [v for v in self.__dict__.values() if not isinstance(v, BaseModel)]
        values.extend((self.__pydantic_extra__ or {}).values())
        if contains_non_finite(values):
            raise ValueError("NaN and Infinity are not valid JSON values")
        return self


class Referrer(OpenRecord):
    """Referring practice and doctor.

    Parameters:
        practiceName: Name of the practice or clinic
        doctorName: Name of the referring doctor
        phoneNumber: Phone number of the referrer (free text, no format check)
        emailAddress: Email address of the referrer (free text, no format check)
    """

    practiceName: Optional[str] = Field(None, description="The name of the practice or clinic.")
    doctorName: Optional[str] = Field(None, description="The name of the referring doctor.")
    phoneNumber: Optional[str] = Field(None, description="The phone number of the referrer.")
    emailAddress: Optional[str] = Field(None, description="The email address of the referrer.")


class Patient(OpenRecord):
    """Patient being referred.

    ``dateOfBirth`` is documented as an ISO date but is stored as free text.
    """

    name: Optional[str] = Field(None, description="The name of the patient.")
    medicareNumber: Optional[str] = Field(None, description="The medicare number of the patient.")
    dateOfBirth: Optional[str] = Field(None, description="The date of birth of the patient.")


class ReferralBase(OpenRecord):
    """Fields shared by incoming and stored referrals."""

    referrer: Optional[Referrer] = None
    patient: Optional[Patient] = None
    initialAssessment: Optional[str] = Field(None, description="Initial assessment of the patient.")
    notes: Optional[str] = Field(None, description="Additional notes related to the referral.")
    specialistName: Optional[str] = Field(
        None, description="The name of the specialist for whom the referral is intended."
    )


class ReferralCreate(ReferralBase):
    """Request body for creating a referral.

    Any ``id`` the caller sends is accepted here and then replaced by the
    registry, so it is deliberately untyped.
    """

    id: Any = Field(None, description="Ignored; the registry assigns ids.")

    def to_record_data(self) -> dict[str, Any]:
        """Return the fields the caller actually sent, without ``id``."""
        data = self.model_dump(exclude_unset=True)
        data.pop("id", None)
        return data


class Referral(ReferralBase):
    """A stored referral with its registry-assigned identifier."""

    id: int = Field(..., description="The referral ID.")

    def to_response(self) -> dict[str, Any]:
        """Serialize with ``id`` first and without fields the caller never sent."""
        data = self.model_dump(exclude_unset=True)
        return {"id": data.pop("id"), **data}
