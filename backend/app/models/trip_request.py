from typing import Any, Dict, List, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

Pace = Literal["relaxed", "moderate", "packed"]


class TripRequest(BaseModel):
    """What the traveller asked for. Frozen once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    destination: str = Field(min_length=1)
    duration: int = Field(ge=1, le=30)
    traveler_count: int = Field(
        default=2,
        ge=1,
        validation_alias=AliasChoices("travelerCount", "travelers", "traveler_count"),
        serialization_alias="travelerCount",
    )
    budget: int = Field(gt=0)
    interests: List[str] = []
    pace: Pace = "moderate"
    preferences: Dict[str, Any] = {}

    @field_validator("destination")
    @classmethod
    def _strip_destination(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("destination must not be blank")
        return value

    @field_validator("interests", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return [] if value is None else value
