"""
Post-processing for next-level trips: per-day extras and whole-trip analysis.
"""

from typing import Optional

from app.graph.parser import Clock, utc_now
from app.graph.utils import parse_amount
from app.models.entities import AttractionPlan, CostUpdates, GeneratedTrip, TripAnalysis
from app.models.trip_request import TripRequest

WEATHER_TIPS = {
    "mumbai": "Avoid monsoon season (June-September). Best time: October-February.",
    "delhi": "Very hot in summer. Best time: October-March.",
    "kolkata": "Humid climate. Carry light cotton clothes.",
    "bangalore": "Pleasant weather year-round. Light jacket for evenings.",
    "goa": "Avoid monsoons. Peak season: November-February.",
}
DEFAULT_WEATHER_TIP = "Check weather forecast before travel."

RAINY_DAY_ALTERNATIVES = [
    "Visit local museums or art galleries",
    "Explore shopping malls or markets",
    "Try local cooking classes",
    "Visit cultural centers or libraries",
]

# reference INR conversion rates, not live
EXCHANGE_RATES = {"USD": 0.012, "EUR": 0.011}

DEFAULT_ATTRACTIONS_PER_DAY = 3


def weather_tip(destination: str) -> str:
    return WEATHER_TIPS.get(destination.strip().lower(), DEFAULT_WEATHER_TIP)


def analyze_pace(trip: GeneratedTrip) -> str:
    if not trip.itinerary:
        return "Relaxed"
    counts = []
    for day in trip.itinerary:
        counts.append(day.attractions_count or len(day.places()) or DEFAULT_ATTRACTIONS_PER_DAY)
    average = sum(counts) / len(counts)
    if average <= 2:
        return "Relaxed"
    if average <= 4:
        return "Moderate"
    return "Packed"


def analyze_budget(trip: GeneratedTrip, requested_budget: int) -> str:
    estimated = parse_amount(trip.budget_breakdown.total_estimated) or requested_budget
    efficiency = requested_budget / estimated * 100
    if efficiency > 110:
        return "Under Budget"
    if efficiency > 90:
        return "On Budget"
    return "Over Budget"


def analyze_variety(trip: GeneratedTrip) -> str:
    days = len(trip.itinerary)
    if not days:
        return "Limited Variety"
    unique_themes = len({day.theme for day in trip.itinerary})
    if unique_themes >= days * 0.8:
        return "Highly Varied"
    if unique_themes >= days * 0.6:
        return "Good Variety"
    return "Limited Variety"


def enhance_next_level_trip(
    trip: GeneratedTrip,
    request: TripRequest,
    plan: Optional[AttractionPlan],
    clock: Clock = utc_now,
) -> GeneratedTrip:
    now = clock()

    trip.trip_summary.generated_at = now
    trip.trip_summary.attraction_plan = plan
    if plan is not None and trip.trip_summary.total_attractions is None:
        trip.trip_summary.total_attractions = plan.total

    tip = weather_tip(request.destination)
    for index, day in enumerate(trip.itinerary):
        day.day_number = index + 1
        day.weather_considerations = tip
        day.alternative_activities = list(RAINY_DAY_ALTERNATIVES)

    trip.cost_updates = CostUpdates(last_updated=now, currency="INR", exchange_rates=dict(EXCHANGE_RATES))
    trip.trip_analysis = TripAnalysis(
        pace_rating=analyze_pace(trip),
        budget_efficiency=analyze_budget(trip, request.budget),
        experience_variety=analyze_variety(trip),
    )
    return trip
