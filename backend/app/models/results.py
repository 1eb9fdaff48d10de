from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field

from app.models.entities import GeneratedTrip


class AIGenerated(BaseModel):
    """Trip written by the language model and validated against the schema."""

    kind: Literal["ai"] = "ai"
    trip: GeneratedTrip
    cached: bool = False
    logs: List[dict] = Field(default_factory=list)


class FallbackGenerated(BaseModel):
    """Synthetic trip built locally because the model call or its reply failed."""

    kind: Literal["fallback"] = "fallback"
    trip: GeneratedTrip
    reason: str
    logs: List[dict] = Field(default_factory=list)


GenerationResult = Annotated[Union[AIGenerated, FallbackGenerated], Field(discriminator="kind")]
