# app/models/attractions.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from app.models.entities import GeoCoordinates


class AttractionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    category: str
    coordinates: Optional[GeoCoordinates] = None
    opening_hours: str = "Check locally"
    entry_fee: str = "Free"
    description: str = ""


class RestaurantRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    cuisine: str = "Local"
    location: Optional[str] = None
    cost: Optional[str] = None
    must_try: Optional[str] = None


class DestinationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    state: Optional[str] = None
    attractions: List[AttractionRecord] = []
    restaurants: List[RestaurantRecord] = []
