from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Range of the store's INTEGER columns
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class PatientPayload(BaseModel):
    """Body of create and full update. ``id`` and ``prescription`` are ignored."""

    model_config = ConfigDict(strict=True, extra="ignore")

    name: str
    age: int = Field(ge=INT64_MIN, le=INT64_MAX)
    doctor: str


class PrescriptionPayload(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    # Required key; null clears the prescription
    prescription: str | None = Field(...)


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    age: int
    doctor: str
    prescription: str | None = None

    def to_json(self) -> dict:
        # Omit prescription when unset; an empty string is kept
        return self.model_dump(mode="json", exclude_none=True)
