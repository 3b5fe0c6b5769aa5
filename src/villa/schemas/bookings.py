from typing import Optional
from pydantic import BaseModel, Field, field_validator

CANCELLATION_REASONS = (
    "Change of travel plans",
    "Found alternative accommodation",
    "Personal / family emergency",
    "Weather / safety concerns",
    "Other",
)


class CancelBookingRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=200)
    notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("reason", "notes")
    @classmethod
    def strip_text(cls, v: Optional[str]):
        if v is None:
            return v
        v = v.strip()
        return v or None

    @field_validator("reason")
    @classmethod
    def reason_required(cls, v: Optional[str]):
        if not v:
            raise ValueError("reason is required")
        return v

    @property
    def full_reason(self) -> str:
        if self.notes:
            return f"{self.reason} - {self.notes}"
        return self.reason
