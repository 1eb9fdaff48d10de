from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.models.attractions import DestinationRecord
from app.models.entities import AttractionPlan, GeneratedTrip
from app.models.trip_request import TripRequest


class GenerationState(BaseModel):
    request: TripRequest
    variant: Literal["classic", "next-level"] = "classic"
    destination_record: Optional[DestinationRecord] = None
    attraction_plan: Optional[AttractionPlan] = None
    prompt: str = ""
    raw_text: Optional[str] = None
    trip: Optional[GeneratedTrip] = None
    failure: Optional[str] = None
    logs: List[dict] = Field(default_factory=list)
