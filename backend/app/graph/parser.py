"""
Turn raw model text into a GeneratedTrip.

Models wrap JSON in code fences, prepend chatty prose, or trail off with
notes. Extraction strips fences and then tries a real JSON decode at every
opening brace until one yields an object, so braces in prose or inside
string values cannot corrupt the result.
"""

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from app.integrations.exceptions import MalformedResponseError
from app.models.entities import GeneratedTrip, TripMetadata
from app.models.trip_request import TripRequest

logger = logging.getLogger(__name__)

FENCE_LINE_RE = re.compile(r"^[ \t]*```[a-zA-Z]*[ \t]*$", re.M)
EDGE_FENCE_RE = re.compile(r"^```[a-zA-Z]*|```$")
TRIP_MARKERS = ("itinerary", "dailyItinerary", "tripSummary")
RAW_LOG_LIMIT = 500

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def strip_fences(text: str) -> str:
    """Remove Markdown fence lines and fences hugging the ends; backticks inside values stay."""
    return EDGE_FENCE_RE.sub("", FENCE_LINE_RE.sub("", text).strip()).strip()


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Return the first JSON object in `text` that looks like a trip.

    Objects without a trip key (small snippets in prose, `{}`, a wrapper
    around the trip) are skipped. If nothing qualifies, the first object
    found is returned.
    """
    cleaned = strip_fences(text or "")
    decoder = json.JSONDecoder()
    first: Optional[Dict[str, Any]] = None

    start = cleaned.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(cleaned, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            if any(key in value for key in TRIP_MARKERS):
                return value
            if first is None:
                first = value
        start = cleaned.find("{", start + 1)

    if first is not None:
        return first
    raise MalformedResponseError("no JSON object found in model reply", raw_text=text or "")


def stamp_metadata(
    trip: GeneratedTrip,
    request: TripRequest,
    *,
    source: str,
    variant: str = "classic",
    model: Optional[str] = None,
    reason: Optional[str] = None,
    clock: Clock = utc_now,
) -> GeneratedTrip:
    generated_at = clock()
    prefix = "ai_trip" if source == "ai" else "fallback_trip"
    trip.id = trip.id or f"{prefix}_{int(generated_at.timestamp() * 1000)}"

    summary = trip.trip_summary
    summary.destination = summary.destination or request.destination
    if summary.duration is None:
        summary.duration = request.duration
    if summary.budget is None:
        summary.budget = request.budget

    trip.metadata = TripMetadata(
        generated_at=generated_at,
        source=source,
        variant=variant,
        model=model,
        original_request=request.model_dump(mode="json", by_alias=True),
        fallback_reason=reason,
    )
    return trip


def parse_trip_response(
    text: str,
    request: TripRequest,
    *,
    variant: str = "classic",
    model: Optional[str] = None,
    clock: Clock = utc_now,
) -> GeneratedTrip:
    """
    Parse a model reply for `request`.

    Raises MalformedResponseError when no object can be extracted, the object
    does not fit the trip schema, or the itinerary length differs from the
    requested duration.
    """
    if not text or not text.strip():
        raise MalformedResponseError("empty model reply", raw_text=text or "")

    payload = extract_json_object(text)

    try:
        trip = GeneratedTrip.model_validate(payload)
    except ValidationError as e:
        raise MalformedResponseError(
            f"reply does not match trip schema ({e.error_count()} errors)", raw_text=text
        ) from e
    except (ArithmeticError, TypeError, ValueError) as e:
        # coercers can still trip over values such as Infinity or 1e999
        raise MalformedResponseError(f"reply could not be read as a trip: {e}", raw_text=text) from e

    if len(trip.itinerary) != request.duration:
        raise MalformedResponseError(
            f"itinerary has {len(trip.itinerary)} days, expected {request.duration}", raw_text=text
        )

    return stamp_metadata(trip, request, source="ai", variant=variant, model=model, clock=clock)


def log_malformed(error: MalformedResponseError) -> None:
    logger.error("Error parsing AI response: %s", error)
    logger.error("Raw AI response: %s", (error.raw_text or "")[:RAW_LOG_LIMIT])
