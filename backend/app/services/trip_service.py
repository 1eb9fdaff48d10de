"""
TripGenerationService: the one entry point route handlers call.

Each generation checks the response cache, then runs the LangGraph pipeline
(prompt -> model -> parse, with a local fallback). Only model-written trips
are cached. Concurrent calls for the same uncached key share one in-flight
pipeline run when coalescing is on.
"""

import asyncio
import json
import logging
import random
from typing import Any, Dict, Optional

from app.config import Settings
from app.data.catalog import AttractionCatalog, default_catalog
from app.graph.build_graph import build_graph
from app.graph.distribution import plan_attractions
from app.graph.parser import Clock, utc_now
from app.graph.prompts import build_chat_prompt
from app.graph.state import GenerationState
from app.integrations.google_places_client import GooglePlacesClient
from app.integrations.llm_client import LLMClient, build_llm_client
from app.models.attractions import DestinationRecord
from app.models.entities import AttractionPlan
from app.models.results import AIGenerated, FallbackGenerated, GenerationResult
from app.models.trip_request import Pace, TripRequest
from app.services.response_cache import ResponseCache

logger = logging.getLogger(__name__)

CHAT_FALLBACK_REPLY = "I'm here to help you plan your trip to India! What destination are you interested in?"


def cache_key(request: TripRequest) -> str:
    """
    Fingerprint of the fields that shape a classic trip.

    Interests are serialized in the order given, so the same interests in a
    different order produce a different key.
    """
    interests = json.dumps(list(request.interests), separators=(",", ":"), ensure_ascii=False)
    return f"trip_{request.destination}_{request.duration}_{request.traveler_count}_{request.budget}_{interests}"


def next_level_cache_key(request: TripRequest) -> str:
    preferences = json.dumps(request.preferences, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)
    return f"next_{cache_key(request)}_{request.pace}_{preferences}"


class TripGenerationService:
    def __init__(
        self,
        llm: LLMClient,
        *,
        catalog: Optional[AttractionCatalog] = None,
        cache: Optional[ResponseCache] = None,
        places: Optional[GooglePlacesClient] = None,
        rng: Optional[random.Random] = None,
        clock: Clock = utc_now,
        coalesce: bool = True,
    ):
        self.llm = llm
        self.catalog = catalog if catalog is not None else default_catalog()
        self.cache = cache if cache is not None else ResponseCache()
        self.places = places
        self.coalesce = coalesce
        self._graphs = {
            "classic": build_graph(llm, variant="classic", rng=rng, clock=clock),
            "next-level": build_graph(llm, variant="next-level", rng=rng, clock=clock),
        }
        self._inflight: Dict[str, asyncio.Task] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "TripGenerationService":
        """Wire the service from configuration. Raises IntegrationError without a model credential."""
        return cls(
            build_llm_client(settings),
            cache=ResponseCache(settings.cache_ttl_seconds, settings.cache_max_entries),
            places=GooglePlacesClient.from_api_key(settings.google_places_api_key),
            coalesce=settings.coalesce_requests,
        )

    async def generate_trip(self, request: TripRequest) -> GenerationResult:
        return await self._generate(cache_key(request), request, "classic")

    async def generate_next_level_trip(self, request: TripRequest) -> GenerationResult:
        return await self._generate(next_level_cache_key(request), request, "next-level")

    def plan_attractions(self, duration: int, pace: Pace = "moderate") -> AttractionPlan:
        return plan_attractions(duration, pace)

    async def generate_chat_reply(self, message: str, context: Optional[Dict[str, Any]] = None) -> str:
        logger.info("Generating chat response")
        prompt = build_chat_prompt(message, context)
        try:
            text = await asyncio.to_thread(self.llm.generate, prompt, False)
        except Exception as e:
            logger.error(f"Error generating chat response: {e}")
            return CHAT_FALLBACK_REPLY
        return text.strip() or CHAT_FALLBACK_REPLY

    async def _generate(self, key: str, request: TripRequest, variant: str) -> GenerationResult:
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Using cached AI response for {request.destination}")
            return AIGenerated(trip=cached.model_copy(deep=True), cached=True)

        if not self.coalesce:
            return await self._generate_uncached(key, request, variant)

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._generate_uncached(key, request, variant))
            self._inflight[key] = task
            task.add_done_callback(lambda done, k=key: self._forget(k, done))
        else:
            logger.info(f"Joining in-flight generation for {request.destination}")
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    async def _resolve_destination(self, destination: str) -> Optional[DestinationRecord]:
        record = self.catalog.find(destination)
        if record is not None or self.places is None:
            return record
        try:
            return await asyncio.to_thread(self.places.lookup_destination, destination)
        except Exception as e:
            logger.warning(f"Live attraction lookup failed for {destination}: {e}")
            return None

    async def _generate_uncached(self, key: str, request: TripRequest, variant: str) -> GenerationResult:
        logger.info(
            f"Generating {variant} trip: {request.destination}, {request.duration} days, "
            f"{request.traveler_count} travelers, budget {request.budget}"
        )
        record = await self._resolve_destination(request.destination)
        state = GenerationState(request=request, variant=variant, destination_record=record)
        result = await self._graphs[variant].ainvoke(state)

        trip = result["trip"]
        logs = result.get("logs") or []
        failure = result.get("failure")
        if failure:
            return FallbackGenerated(trip=trip, reason=failure, logs=logs)

        self.cache.put(key, trip.model_copy(deep=True))
        return AIGenerated(trip=trip, logs=logs)
