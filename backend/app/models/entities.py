# app/models/entities.py
"""
Schema of a generated trip.

Model replies are camelCase JSON with loosely typed values (prices as text or
numbers, ratings like "4.5/5", coordinates as objects or "lat, lng" strings).
The annotated types below coerce those shapes at the boundary so the rest of
the code works with one structure whichever source produced the trip.
"""

import json
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from app.graph.utils import parse_amount, parse_rating


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        return ", ".join(t for t in (_as_text(v) for v in value) if t)
    if isinstance(value, dict):
        for k in ("text", "name", "title", "value"):
            if isinstance(value.get(k), str):
                return value[k]
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _as_text_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (str, int, float)):
        value = [value]
    if not isinstance(value, list):
        return []
    return [t for t in (_as_text(v) for v in value) if t]


def _as_dish_list(value: Any) -> List[str]:
    # "Chicken Tikka, Fish & Chips" -> two dishes
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return _as_text_list(value)


def _as_text_dict(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    out = {}
    for k, v in value.items():
        text = _as_text(v)
        if text is not None:
            out[str(k)] = text
    return out


Text = Annotated[Optional[str], BeforeValidator(_as_text)]
TextList = Annotated[List[str], BeforeValidator(_as_text_list)]
DishList = Annotated[List[str], BeforeValidator(_as_dish_list)]
TextDict = Annotated[Dict[str, str], BeforeValidator(_as_text_dict)]
Rating = Annotated[Optional[float], BeforeValidator(parse_rating)]
Amount = Annotated[Optional[int], BeforeValidator(parse_amount)]


class TripModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class GeoCoordinates(TripModel):
    lat: Optional[float] = None
    lng: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_loose_shapes(cls, data: Any) -> Any:
        if isinstance(data, str):
            parts = [p.strip() for p in data.split(",")]
            if len(parts) != 2:
                return {}
            try:
                return {"lat": float(parts[0]), "lng": float(parts[1])}
            except ValueError:
                return {}
        if isinstance(data, (list, tuple)) and len(data) == 2:
            return {"lat": data[0], "lng": data[1]}
        if isinstance(data, dict):
            data = dict(data)
            if "lat" not in data and "latitude" in data:
                data["lat"] = data.pop("latitude")
            if "lng" not in data:
                for k in ("longitude", "lon"):
                    if k in data:
                        data["lng"] = data.pop(k)
                        break
            for k in ("lat", "lng"):
                try:
                    data[k] = float(data[k]) if data.get(k) is not None else None
                except (TypeError, ValueError):
                    data[k] = None
        return data


class Place(TripModel):
    place_name: str = Field(
        validation_alias=AliasChoices("placeName", "name", "place_name"),
        serialization_alias="placeName",
    )
    place_details: Text = Field(
        None,
        validation_alias=AliasChoices("placeDetails", "description", "place_details"),
        serialization_alias="placeDetails",
    )
    place_image_url: Text = None
    geo_coordinates: Optional[GeoCoordinates] = None
    ticket_pricing: Text = Field(
        None,
        validation_alias=AliasChoices("ticketPricing", "entryFee", "ticket_pricing"),
        serialization_alias="ticketPricing",
    )
    rating: Rating = None
    time_to_travel: Text = None
    best_time_to_visit: Text = None
    duration: Text = None
    insider_tip: Text = Field(
        None,
        validation_alias=AliasChoices("insiderTip", "insiderTips", "insider_tip"),
        serialization_alias="insiderTip",
    )
    type: Text = None


class Transport(TripModel):
    origin: Text = Field(None, validation_alias=AliasChoices("from", "origin"), serialization_alias="from")
    mode: Text = None
    duration: Text = None
    cost: Text = None


class TimeSegment(TripModel):
    time: Text = None
    activities: List[Place] = Field(
        default_factory=list,
        validation_alias=AliasChoices("activities", "places"),
        serialization_alias="activities",
    )
    transport: Optional[Transport] = None

    @model_validator(mode="before")
    @classmethod
    def _single_attraction(cls, data: Any) -> Any:
        # {"time": ..., "attraction": {...}} is a one-place segment
        if isinstance(data, dict) and "attraction" in data and not (data.get("activities") or data.get("places")):
            data = dict(data)
            data["activities"] = [data.pop("attraction")]
        return data


class RestaurantSuggestion(TripModel):
    name: str
    cuisine: Text = None
    location: Text = None
    average_cost: Text = Field(
        None,
        validation_alias=AliasChoices("averageCost", "cost", "average_cost"),
        serialization_alias="averageCost",
    )
    must_try: DishList = []
    ambiance: Text = None
    geo_coordinates: Optional[GeoCoordinates] = None


class MealSegment(TripModel):
    time: Text = None
    restaurant: Optional[RestaurantSuggestion] = None


class DayPlan(TripModel):
    day: int
    day_number: Optional[int] = None
    theme: str = ""
    attractions_count: Optional[int] = None
    morning: Optional[TimeSegment] = None
    lunch: Optional[MealSegment] = None
    afternoon: Optional[TimeSegment] = None
    evening: Optional[TimeSegment] = None
    daily_budget: TextDict = {}
    travel_optimization: TextDict = {}
    weather_considerations: Text = None
    alternative_activities: TextList = []

    @model_validator(mode="before")
    @classmethod
    def _flatten_schedule(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        schedule = data.pop("schedule", None)
        if isinstance(schedule, dict):
            for slot, value in schedule.items():
                data.setdefault(slot, value)
        # a bare day-level activity list becomes the morning
        if "activities" in data and not data.get("morning"):
            data["morning"] = {"activities": data.pop("activities")}
        return data

    def places(self) -> List[Place]:
        out: List[Place] = []
        for segment in (self.morning, self.afternoon, self.evening):
            if segment is not None:
                out.extend(segment.activities)
        return out


class Hotel(TripModel):
    hotel_name: str = Field(
        validation_alias=AliasChoices("hotelName", "name", "hotel_name"),
        serialization_alias="hotelName",
    )
    hotel_address: Text = None
    price: Text = None
    hotel_image_url: Text = None
    geo_coordinates: Optional[GeoCoordinates] = None
    rating: Rating = None
    description: Text = None


class AttractionPlan(TripModel):
    total: int
    per_day: int
    distribution: List[int]


class TripSummary(TripModel):
    destination: str = ""
    duration: Optional[int] = None
    travelers: Text = None
    budget: Amount = Field(
        None,
        validation_alias=AliasChoices("budget", "totalBudget"),
        serialization_alias="budget",
    )
    currency: str = "INR"
    total_estimated_cost: Text = None
    best_time: Text = None
    highlights: TextList = []
    pace: Text = None
    total_attractions: Optional[int] = None
    trip_mood: Text = None
    attraction_plan: Optional[AttractionPlan] = None
    generated_at: Optional[datetime] = None


class BudgetBreakdown(TripModel):
    total_budget: Text = None
    total_estimated: Text = None
    daily_average: Text = None
    categories: TextDict = Field(
        default_factory=dict,
        validation_alias=AliasChoices("categories", "dailyBreakdown"),
        serialization_alias="categories",
    )
    allocations: Dict[str, int] = {}
    budget_tips: TextList = []


class TravelTips(TripModel):
    transportation: TextList = []
    food: TextList = []
    general: TextList = []
    culture: TextList = []
    weather: TextList = []
    safety: TextList = []
    photography: TextList = []

    @model_validator(mode="before")
    @classmethod
    def _bare_list_is_general(cls, data: Any) -> Any:
        if isinstance(data, (list, str)):
            return {"general": data}
        return data


class TripAnalysis(TripModel):
    pace_rating: str
    budget_efficiency: str
    experience_variety: str


class CostUpdates(TripModel):
    last_updated: datetime
    currency: str = "INR"
    exchange_rates: Dict[str, float] = {}


class TripMetadata(TripModel):
    generated_at: datetime
    source: Literal["ai", "fallback"]
    variant: Literal["classic", "next-level"] = "classic"
    version: str = "1.0.0"
    model: Optional[str] = None
    original_request: Dict[str, Any] = {}
    fallback_reason: Optional[str] = None


class GeneratedTrip(TripModel):
    id: Optional[str] = None
    trip_summary: TripSummary = Field(default_factory=TripSummary)
    hotels: List[Hotel] = Field(
        default_factory=list,
        validation_alias=AliasChoices("hotels", "hotelOptions"),
        serialization_alias="hotels",
    )
    itinerary: List[DayPlan] = Field(
        default_factory=list,
        validation_alias=AliasChoices("itinerary", "dailyItinerary"),
        serialization_alias="itinerary",
    )
    budget_breakdown: BudgetBreakdown = Field(default_factory=BudgetBreakdown)
    travel_tips: TravelTips = Field(default_factory=TravelTips)
    local_experiences: TextList = []
    trip_analysis: Optional[TripAnalysis] = None
    cost_updates: Optional[CostUpdates] = None
    metadata: Optional[TripMetadata] = None
