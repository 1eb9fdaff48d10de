import logging
from typing import Dict, List, Optional

from app.graph.parser import Clock, stamp_metadata, utc_now
from app.graph.prompts import HOTEL_IMAGE_URL, PLACE_IMAGE_URL
from app.graph.utils import format_inr, take_cycling
from app.models.attractions import AttractionRecord, DestinationRecord
from app.models.entities import (
    AttractionPlan,
    BudgetBreakdown,
    DayPlan,
    GeneratedTrip,
    GeoCoordinates,
    Hotel,
    MealSegment,
    Place,
    RestaurantSuggestion,
    TimeSegment,
    TravelTips,
    TripSummary,
)
from app.models.trip_request import TripRequest

logger = logging.getLogger(__name__)

# percent of the total budget per category; must add up to 100
BUDGET_SPLIT = {
    "accommodation": 40,
    "food": 30,
    "activities": 20,
    "transport": 10,
}

INDIA_CENTROID = GeoCoordinates(lat=20.5937, lng=78.9629)

SLOT_TIMES = {
    "morning": "9:00 AM - 12:00 PM",
    "lunch": "12:30 PM - 2:00 PM",
    "afternoon": "2:00 PM - 6:00 PM",
    "evening": "6:00 PM - 9:00 PM",
}

FALLBACK_TIPS = [
    "Book accommodations in advance",
    "Try local cuisine for authentic experience",
    "Respect local customs and traditions",
    "Keep emergency contacts handy",
]


def split_budget(budget: int) -> Dict[str, int]:
    """Partition `budget` by BUDGET_SPLIT. The parts always sum to `budget`."""
    parts = {name: budget * pct // 100 for name, pct in BUDGET_SPLIT.items()}
    parts["accommodation"] += budget - sum(parts.values())
    return parts


def _day_theme(index: int, duration: int, destination: str) -> str:
    if index == 0:
        return "Arrival & Local Exploration"
    if index == duration - 1:
        return "Departure & Shopping"
    return f"{destination} Highlights"


def _place_from_record(attraction: AttractionRecord) -> Place:
    return Place(
        place_name=attraction.name,
        place_details=attraction.description,
        place_image_url=PLACE_IMAGE_URL,
        geo_coordinates=attraction.coordinates,
        ticket_pricing=attraction.entry_fee,
        best_time_to_visit=attraction.opening_hours,
        type=attraction.category,
    )


def _placeholder_place(number: int, destination: str, coordinates: GeoCoordinates) -> Place:
    return Place(
        place_name=f"Popular Attraction {number} in {destination}",
        place_details="Must-visit local attraction with cultural significance",
        place_image_url=PLACE_IMAGE_URL,
        geo_coordinates=coordinates,
        ticket_pricing="₹200 per person",
        rating=4.5,
        time_to_travel="30 minutes",
        best_time_to_visit="Morning",
    )


def _segments(places: List[Place]) -> List[Optional[TimeSegment]]:
    # spread a day's places across morning, afternoon, evening in order
    buckets: List[List[Place]] = [[], [], []]
    for j, place in enumerate(places):
        buckets[min(j * 3 // len(places), 2)].append(place)
    slots = ("morning", "afternoon", "evening")
    return [
        TimeSegment(time=SLOT_TIMES[slot], activities=bucket) if bucket else None
        for slot, bucket in zip(slots, buckets)
    ]


def build_fallback_trip(
    request: TripRequest,
    record: Optional[DestinationRecord] = None,
    plan: Optional[AttractionPlan] = None,
    *,
    variant: str = "classic",
    reason: str = "generation failed",
    clock: Clock = utc_now,
) -> GeneratedTrip:
    """
    Build a complete trip from the request and static data alone.

    Days use real catalog attractions when the destination is known (in
    catalog order, wrapping around), otherwise numbered placeholders. Never
    calls out and never raises for a valid request.
    """
    destination = request.destination
    duration = request.duration
    budget = request.budget
    travelers = request.traveler_count
    daily_budget = budget // duration

    attractions = list(record.attractions) if record else []
    restaurants = list(record.restaurants) if record else []
    anchor = attractions[0].coordinates if attractions and attractions[0].coordinates else INDIA_CENTROID

    itinerary: List[DayPlan] = []
    consumed = 0
    for i in range(duration):
        count = plan.distribution[i] if plan and i < len(plan.distribution) else 1
        count = max(count, 1)
        if attractions:
            places = [_place_from_record(a) for a in take_cycling(attractions, count, consumed)]
        else:
            places = [_placeholder_place(consumed + k + 1, destination, anchor) for k in range(count)]
        consumed += count

        if restaurants:
            spot = restaurants[i % len(restaurants)]
            restaurant = RestaurantSuggestion(
                name=spot.name,
                cuisine=spot.cuisine,
                location=spot.location,
                average_cost=spot.cost,
                must_try=spot.must_try,
            )
        else:
            restaurant = RestaurantSuggestion(
                name="Local Restaurant",
                cuisine="Local",
                average_cost=f"{format_inr(budget * 15 // 100 // duration)} for {travelers} people",
            )

        morning, afternoon, evening = _segments(places)
        itinerary.append(
            DayPlan(
                day=i + 1,
                theme=_day_theme(i, duration, destination),
                attractions_count=len(places),
                morning=morning,
                lunch=MealSegment(time=SLOT_TIMES["lunch"], restaurant=restaurant),
                afternoon=afternoon,
                evening=evening,
                daily_budget={"total": format_inr(daily_budget)},
            )
        )

    allocations = split_budget(budget)
    trip = GeneratedTrip(
        trip_summary=TripSummary(
            destination=destination,
            duration=duration,
            travelers=f"{travelers} people",
            budget=budget,
            currency="INR",
            total_estimated_cost=format_inr(budget * 90 // 100),
            best_time="October to March" if variant == "next-level" else "Year-round",
            highlights=[f"Explore {destination}", "Cultural experiences", "Local cuisine"],
            pace=request.pace if variant == "next-level" else None,
            total_attractions=plan.total if plan else None,
            attraction_plan=plan,
        ),
        hotels=[
            Hotel(
                hotel_name=f"Heritage Hotel {destination}",
                hotel_address=f"Central {destination}",
                price=f"{format_inr(daily_budget * 40 // 100)} per night",
                hotel_image_url=HOTEL_IMAGE_URL,
                geo_coordinates=anchor,
                rating=4.2,
                description="Comfortable accommodation with modern amenities",
            )
        ],
        itinerary=itinerary,
        budget_breakdown=BudgetBreakdown(
            total_budget=format_inr(budget),
            total_estimated=format_inr(budget),
            daily_average=format_inr(daily_budget),
            categories={name: format_inr(amount) for name, amount in allocations.items()},
            allocations=allocations,
        ),
        travel_tips=TravelTips(general=FALLBACK_TIPS),
    )

    logger.warning(f"Serving fallback trip for {destination} ({duration} days): {reason}")
    return stamp_metadata(trip, request, source="fallback", variant=variant, reason=reason, clock=clock)
