"""
Google Places lookup for destinations missing from the static catalog.

Text searches for attractions and restaurants are folded into a transient
DestinationRecord so prompts and fallbacks can name real places. Disabled
unless GOOGLE_PLACES_API_KEY is configured.
"""

import logging
from typing import Any, Dict, List, Optional

import googlemaps
from googlemaps.exceptions import ApiError, HTTPError, Timeout, TransportError

from app.graph.utils import normalize_destination
from app.models.attractions import AttractionRecord, DestinationRecord, RestaurantRecord
from app.models.entities import GeoCoordinates

logger = logging.getLogger(__name__)

PRICE_LEVELS = {0: "Free", 1: "₹", 2: "₹₹", 3: "₹₹₹", 4: "₹₹₹₹"}

MAX_ATTRACTIONS = 15
MAX_RESTAURANTS = 5


class GooglePlacesClient:
    """Google Places API client returning catalog-shaped destination records"""

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def from_api_key(cls, api_key: Optional[str]) -> Optional["GooglePlacesClient"]:
        if not api_key:
            logger.warning("GOOGLE_PLACES_API_KEY not found; live attraction lookup disabled")
            return None
        logger.info("Google Places API initialized")
        return cls(googlemaps.Client(key=api_key))

    def _text_search(self, query: str) -> List[Dict[str, Any]]:
        try:
            result = self.client.places(query=query)
        except (ApiError, HTTPError, Timeout, TransportError) as e:
            logger.warning(f"Places search failed for '{query}': {e}")
            return []
        return result.get("results", []) or []

    @staticmethod
    def _coordinates(place: Dict[str, Any]) -> Optional[GeoCoordinates]:
        location = (place.get("geometry") or {}).get("location") or {}
        if "lat" not in location or "lng" not in location:
            return None
        return GeoCoordinates(lat=location["lat"], lng=location["lng"])

    def _to_attraction(self, place: Dict[str, Any]) -> AttractionRecord:
        types = place.get("types") or []
        category = next((t for t in types if t not in ("point_of_interest", "establishment")), "attraction")
        rating = place.get("rating")
        description = place.get("formatted_address", "")
        if rating:
            description = f"Rated {rating}/5 - {description}" if description else f"Rated {rating}/5"
        return AttractionRecord(
            name=place.get("name", "Unknown"),
            category=category.replace("_", " "),
            coordinates=self._coordinates(place),
            opening_hours="Check locally",
            entry_fee="Check locally",
            description=description,
        )

    def _to_restaurant(self, place: Dict[str, Any]) -> RestaurantRecord:
        return RestaurantRecord(
            name=place.get("name", "Unknown"),
            cuisine="Local",
            location=place.get("formatted_address"),
            cost=PRICE_LEVELS.get(place.get("price_level")),
        )

    def lookup_destination(self, destination: str) -> Optional[DestinationRecord]:
        """Build a destination record from live search results, or None."""
        destination = destination.strip()
        attractions = self._text_search(f"top tourist attractions in {destination}")
        if not attractions:
            logger.info(f"No Places attractions found for {destination}")
            return None
        restaurants = self._text_search(f"best restaurants in {destination}")

        logger.info(
            f"Places lookup for {destination}: {len(attractions)} attractions, {len(restaurants)} restaurants"
        )
        return DestinationRecord(
            key=normalize_destination(destination),
            name=destination,
            attractions=[self._to_attraction(p) for p in attractions[:MAX_ATTRACTIONS]],
            restaurants=[self._to_restaurant(p) for p in restaurants[:MAX_RESTAURANTS]],
        )
