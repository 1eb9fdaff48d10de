import asyncio
import json
from typing import Any, Dict

from app.config import Settings
from app.models.entities import GeneratedTrip
from app.models.results import AIGenerated, GenerationResult
from app.models.trip_request import TripRequest
from app.services.trip_service import TripGenerationService


def format_trip(trip: GeneratedTrip) -> Dict[str, Any]:
    """Serialize a trip the way clients read it: camelCase keys, no empty fields."""
    return trip.model_dump(mode="json", by_alias=True, exclude_none=True)


def format_result(result: GenerationResult) -> Dict[str, Any]:
    trip = format_trip(result.trip)
    if isinstance(result, AIGenerated):
        return {
            "trip": trip,
            "source": "ai",
            "cached": result.cached,
            "logs": result.logs,
            "success": True,
            "message": f"Trip generated for {result.trip.trip_summary.destination}",
        }
    return {
        "trip": trip,
        "source": "fallback",
        "cached": False,
        "reason": result.reason,
        "logs": result.logs,
        "success": True,
        "message": f"Fallback trip generated for {result.trip.trip_summary.destination}",
    }


if __name__ == "__main__":
    settings = Settings.from_env()
    service = TripGenerationService.from_settings(settings)
    request = TripRequest(
        destination="Mumbai",
        duration=3,
        traveler_count=2,
        budget=15000,
        interests=["history", "food"],
    )
    result = asyncio.run(service.generate_trip(request))
    print(json.dumps(format_result(result), indent=2, ensure_ascii=False))
