import asyncio
from unittest.mock import MagicMock, patch

import pytest

from app.integrations.exceptions import UpstreamAPIError
from app.models.attractions import AttractionRecord, DestinationRecord
from app.models.results import AIGenerated, FallbackGenerated
from app.models.trip_request import TripRequest
from app.services.response_cache import ResponseCache
from app.services.trip_service import (
    CHAT_FALLBACK_REPLY,
    TripGenerationService,
    cache_key,
    next_level_cache_key,
)


@pytest.fixture
def make_service(fixed_clock, catalog):
    def _make(llm, **kwargs):
        kwargs.setdefault("catalog", catalog)
        kwargs.setdefault("clock", fixed_clock)
        return TripGenerationService(llm, **kwargs)
    return _make


class TestCacheKey:
    def test_format(self, mumbai_request):
        assert cache_key(mumbai_request) == 'trip_Mumbai_3_2_15000_["history","food"]'

    def test_interest_order_matters(self):
        a = TripRequest(destination="Goa", duration=2, budget=5000, interests=["beach", "food"])
        b = TripRequest(destination="Goa", duration=2, budget=5000, interests=["food", "beach"])
        assert cache_key(a) != cache_key(b)

    def test_next_level_key_is_separate_and_pace_aware(self, mumbai_request):
        packed = mumbai_request.model_copy(update={"pace": "packed"})
        assert next_level_cache_key(mumbai_request) != cache_key(mumbai_request)
        assert next_level_cache_key(mumbai_request) != next_level_cache_key(packed)


class TestGenerateTrip:
    def test_ai_result(self, make_service, fake_llm_factory, trip_reply, mumbai_request):
        llm = fake_llm_factory(trip_reply())
        result = asyncio.run(make_service(llm).generate_trip(mumbai_request))

        assert isinstance(result, AIGenerated)
        assert result.cached is False
        assert result.trip.metadata.source == "ai"
        assert len(result.trip.itinerary) == 3
        assert "Gateway of India" in llm.prompts[0]
        assert [log["stage"] for log in result.logs] == ["Prompt Built", "Model Call", "Parse"]

    def test_second_call_is_served_from_cache(self, make_service, fake_llm_factory, trip_reply, mumbai_request):
        llm = fake_llm_factory(trip_reply())
        service = make_service(llm)

        async def run():
            return await service.generate_trip(mumbai_request), await service.generate_trip(mumbai_request)

        first, second = asyncio.run(run())
        assert llm.calls == 1
        assert second.cached is True
        assert second.trip.id == first.trip.id
        assert second.trip.metadata.generated_at == first.trip.metadata.generated_at

    def test_cached_trip_is_a_copy(self, make_service, fake_llm_factory, trip_reply, mumbai_request):
        service = make_service(fake_llm_factory(trip_reply()))

        async def run():
            first = await service.generate_trip(mumbai_request)
            first.trip.itinerary.clear()
            return await service.generate_trip(mumbai_request)

        assert len(asyncio.run(run()).trip.itinerary) == 3

    def test_expired_entry_triggers_new_call(
        self, make_service, fake_llm_factory, trip_reply, mumbai_request, manual_clock
    ):
        llm = fake_llm_factory(trip_reply())
        service = make_service(llm, cache=ResponseCache(ttl_seconds=60, clock=manual_clock))

        async def run():
            await service.generate_trip(mumbai_request)
            manual_clock.advance(61)
            return await service.generate_trip(mumbai_request)

        assert asyncio.run(run()).cached is False
        assert llm.calls == 2

    def test_cache_capacity_is_bounded(self, make_service, fake_llm_factory, trip_reply):
        service = make_service(fake_llm_factory(trip_reply(days=1)), cache=ResponseCache(max_entries=3))

        async def run():
            for budget in range(1000, 1005):
                await service.generate_trip(TripRequest(destination="Pune", duration=1, budget=budget))

        asyncio.run(run())
        assert len(service.cache) == 3

    def test_garbage_reply_falls_back(self, make_service, fake_llm_factory, mumbai_request):
        llm = fake_llm_factory("this is not json")
        service = make_service(llm)

        async def run():
            return await service.generate_trip(mumbai_request), await service.generate_trip(mumbai_request)

        first, second = asyncio.run(run())
        assert isinstance(first, FallbackGenerated)
        assert first.reason.startswith("malformed response")
        assert first.trip.metadata.source == "fallback"
        assert first.trip.trip_summary.destination == "Mumbai"
        assert first.trip.trip_summary.budget == 15000
        assert len(first.trip.itinerary) == 3
        # fallbacks are never cached
        assert isinstance(second, FallbackGenerated)
        assert llm.calls == 2
        assert len(service.cache) == 0

    def test_upstream_error_falls_back(self, make_service, fake_llm_factory, mumbai_request):
        llm = fake_llm_factory(UpstreamAPIError("quota exceeded"))
        result = asyncio.run(make_service(llm).generate_trip(mumbai_request))
        assert isinstance(result, FallbackGenerated)
        assert "quota exceeded" in result.reason
        assert result.trip.itinerary[0].places()[0].place_name == "Gateway of India"

    def test_wrong_day_count_falls_back(self, make_service, fake_llm_factory, trip_reply, mumbai_request):
        result = asyncio.run(make_service(fake_llm_factory(trip_reply(days=5))).generate_trip(mumbai_request))
        assert isinstance(result, FallbackGenerated)
        assert len(result.trip.itinerary) == 3


class TestCoalescing:
    def test_concurrent_identical_requests_share_one_call(
        self, make_service, fake_llm_factory, trip_reply, mumbai_request
    ):
        llm = fake_llm_factory(trip_reply(), delay=0.05)
        service = make_service(llm)

        async def run():
            return await asyncio.gather(*(service.generate_trip(mumbai_request) for _ in range(3)))

        results = asyncio.run(run())
        assert llm.calls == 1
        assert all(isinstance(r, AIGenerated) for r in results)
        assert len({r.trip.id for r in results}) == 1
        assert service._inflight == {}

    def test_disabled_coalescing_calls_per_request(
        self, make_service, fake_llm_factory, trip_reply, mumbai_request
    ):
        llm = fake_llm_factory(trip_reply(), delay=0.05)
        service = make_service(llm, coalesce=False)

        async def run():
            return await asyncio.gather(*(service.generate_trip(mumbai_request) for _ in range(2)))

        asyncio.run(run())
        assert llm.calls == 2


class TestNextLevel:
    def test_enhanced_trip(self, make_service, fake_llm_factory, trip_reply):
        llm = fake_llm_factory(trip_reply(destination="Delhi", day_key="dailyItinerary"))
        request = TripRequest(destination="Delhi", duration=3, budget=30000, pace="packed")
        result = asyncio.run(make_service(llm).generate_next_level_trip(request))

        assert isinstance(result, AIGenerated)
        assert "Per Day Distribution: 4, 4, 3" in llm.prompts[0]
        assert result.trip.metadata.variant == "next-level"
        assert result.trip.trip_summary.attraction_plan.total == 11
        assert [d.day_number for d in result.trip.itinerary] == [1, 2, 3]
        assert result.trip.trip_analysis is not None
        assert result.logs[0]["stage"] == "Attraction Plan"

    def test_fallback_follows_distribution(self, make_service, fake_llm_factory):
        request = TripRequest(destination="Delhi", duration=3, budget=30000, pace="packed")
        result = asyncio.run(make_service(fake_llm_factory("{}")).generate_next_level_trip(request))

        assert isinstance(result, FallbackGenerated)
        assert [len(d.places()) for d in result.trip.itinerary] == [4, 4, 3]

    def test_variants_do_not_share_cache(self, make_service, fake_llm_factory, trip_reply, mumbai_request):
        llm = fake_llm_factory(trip_reply())
        service = make_service(llm)

        async def run():
            await service.generate_trip(mumbai_request)
            return await service.generate_next_level_trip(mumbai_request)

        assert asyncio.run(run()).cached is False
        assert llm.calls == 2

    def test_plan_attractions(self, make_service, fake_llm_factory):
        plan = make_service(fake_llm_factory("")).plan_attractions(3, "packed")
        assert plan.distribution == [4, 4, 3]


class TestDestinationLookup:
    def test_places_used_for_unknown_destination(self, make_service, fake_llm_factory):
        places = MagicMock()
        places.lookup_destination.return_value = DestinationRecord(
            key="ooty",
            name="Ooty",
            attractions=[AttractionRecord(name="Botanical Garden", category="garden")],
        )
        llm = fake_llm_factory("garbage")
        request = TripRequest(destination="Ooty", duration=1, budget=4000)
        result = asyncio.run(make_service(llm, places=places).generate_trip(request))

        places.lookup_destination.assert_called_once_with("Ooty")
        assert "Botanical Garden" in llm.prompts[0]
        assert result.trip.itinerary[0].places()[0].place_name == "Botanical Garden"

    def test_places_skipped_for_catalog_destination(self, make_service, fake_llm_factory, trip_reply, mumbai_request):
        places = MagicMock()
        asyncio.run(make_service(fake_llm_factory(trip_reply()), places=places).generate_trip(mumbai_request))
        places.lookup_destination.assert_not_called()

    def test_places_failure_is_not_fatal(self, make_service, fake_llm_factory):
        places = MagicMock()
        places.lookup_destination.side_effect = RuntimeError("network down")
        request = TripRequest(destination="Ooty", duration=1, budget=4000)
        result = asyncio.run(make_service(fake_llm_factory("garbage"), places=places).generate_trip(request))
        assert result.trip.itinerary[0].places()[0].place_name == "Popular Attraction 1 in Ooty"


class TestChat:
    def test_reply_is_plain_text(self, make_service, fake_llm_factory):
        llm = fake_llm_factory("  Visit Goa between November and February.  ")
        reply = asyncio.run(make_service(llm).generate_chat_reply("When to visit Goa?"))
        assert reply == "Visit Goa between November and February."
        assert llm.json_modes == [False]

    def test_failure_returns_fixed_reply(self, make_service, fake_llm_factory):
        llm = fake_llm_factory(UpstreamAPIError("down"))
        assert asyncio.run(make_service(llm).generate_chat_reply("hi")) == CHAT_FALLBACK_REPLY


class TestUnreadableReplies:
    def test_infinite_budget_still_answers(self, make_service, fake_llm_factory, trip_reply, mumbai_request):
        reply = trip_reply().replace('"budget": "₹15,000"', '"budget": Infinity', 1)
        result = asyncio.run(make_service(fake_llm_factory(reply)).generate_trip(mumbai_request))
        assert isinstance(result, AIGenerated)
        assert result.trip.trip_summary.budget == 15000

    def test_unexpected_parse_error_falls_back_for_every_waiter(
        self, make_service, fake_llm_factory, trip_reply, mumbai_request
    ):
        service = make_service(fake_llm_factory(trip_reply(), delay=0.05))

        async def run():
            return await asyncio.gather(*(service.generate_trip(mumbai_request) for _ in range(2)))

        with patch("app.graph.build_graph.parse_trip_response", side_effect=RuntimeError("parser bug")):
            results = asyncio.run(run())

        assert all(isinstance(r, FallbackGenerated) for r in results)
        assert "parser bug" in results[0].reason
        assert len(results[0].trip.itinerary) == 3
