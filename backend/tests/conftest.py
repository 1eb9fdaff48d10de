import json
import threading
import time
from datetime import datetime, timezone

import pytest

from app.data.catalog import default_catalog
from app.models.trip_request import TripRequest

FIXED_NOW = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)


class FakeLLM:
    """
    Stand-in for OpenAIClient/GeminiClient.

    `replies` is either one reply used for every call or a list consumed in
    order. A reply that is an exception instance is raised instead.
    """

    model = "fake-model"

    def __init__(self, replies, delay: float = 0.0):
        self._replies = replies
        self.delay = delay
        self.prompts = []
        self.json_modes = []
        self._lock = threading.Lock()

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def generate(self, prompt: str, json_mode: bool = True) -> str:
        with self._lock:
            index = len(self.prompts)
            self.prompts.append(prompt)
            self.json_modes.append(json_mode)
        if self.delay:
            time.sleep(self.delay)
        reply = self._replies[index] if isinstance(self._replies, list) else self._replies
        if isinstance(reply, Exception):
            raise reply
        return reply


class ManualClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def build_trip_payload(destination: str = "Mumbai", days: int = 3, day_key: str = "itinerary") -> dict:
    """A well-formed model reply for `days` days."""
    return {
        "tripSummary": {
            "destination": destination,
            "duration": days,
            "travelers": "2 people",
            "budget": "₹15,000",
            "currency": "INR",
            "totalEstimatedCost": "₹13,500",
            "highlights": ["Gateway of India", "Street food"],
        },
        "hotels": [
            {
                "hotelName": "Taj Mahal Palace",
                "hotelAddress": "Apollo Bunder, Colaba",
                "price": "₹2,000 per night",
                "geoCoordinates": {"lat": 18.9217, "lng": 72.8332},
                "rating": "4.8/5",
            }
        ],
        day_key: [
            {
                "day": i + 1,
                "theme": f"Theme {i + 1}",
                "morning": {
                    "time": "9:00 AM - 12:00 PM",
                    "activities": [
                        {
                            "placeName": f"Place {i + 1}",
                            "placeDetails": "Built in {1924}, a landmark",
                            "geoCoordinates": "18.92, 72.83",
                            "ticketPricing": "Free",
                            "rating": 4.6,
                        }
                    ],
                },
                "lunch": {
                    "time": "12:30 PM",
                    "restaurant": {"name": "Leopold Cafe", "cost": "₹800", "mustTry": "Vada pav, Chai"},
                },
            }
            for i in range(days)
        ],
        "budgetBreakdown": {"totalBudget": "₹15,000", "totalEstimated": "₹13,500"},
        "travelTips": ["Carry water", "Use local trains"],
    }


@pytest.fixture
def trip_payload():
    return build_trip_payload


@pytest.fixture
def trip_reply():
    def _reply(destination: str = "Mumbai", days: int = 3, day_key: str = "itinerary") -> str:
        return json.dumps(build_trip_payload(destination, days, day_key), ensure_ascii=False)
    return _reply


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def mumbai_request():
    return TripRequest(
        destination="Mumbai",
        duration=3,
        travelers=2,
        budget=15000,
        interests=["history", "food"],
    )


@pytest.fixture
def fake_llm_factory():
    return FakeLLM
