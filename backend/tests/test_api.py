import pytest
from fastapi.testclient import TestClient

from app.api import app, get_trip_service
from app.services.trip_service import TripGenerationService


@pytest.fixture
def client_for(fake_llm_factory, catalog, fixed_clock):
    """TestClient with the trip service swapped for one backed by a fake model."""
    def _client(reply):
        service = TripGenerationService(fake_llm_factory(reply), catalog=catalog, clock=fixed_clock)
        app.dependency_overrides[get_trip_service] = lambda: service
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()


MUMBAI_BODY = {
    "destination": "Mumbai",
    "duration": 3,
    "travelerCount": 2,
    "budget": 15000,
    "interests": ["history", "food"],
}


class TestMetaEndpoints:
    def test_root(self, client_for):
        body = client_for("").get("/").json()
        assert body["message"] == "TripCraft Backend API"
        assert body["endpoints"]["generate_trip"] == "/trips/generate"

    def test_health(self, client_for):
        assert client_for("").get("/health").json() == {"status": "healthy", "service": "TripCraft Backend"}

    def test_destinations(self, client_for):
        destinations = client_for("").get("/destinations").json()["destinations"]
        assert len(destinations) == 10
        assert destinations[0]["key"] == "mumbai"
        assert destinations[0]["state"] == "Maharashtra"

    def test_attraction_plan(self, client_for):
        response = client_for("").get("/attractions/plan", params={"duration": 3, "pace": "packed"})
        assert response.status_code == 200
        assert response.json() == {"total": 11, "perDay": 4, "distribution": [4, 4, 3]}

    @pytest.mark.parametrize("params", [{"duration": 0}, {"duration": 31}, {"duration": 2, "pace": "frantic"}])
    def test_attraction_plan_validation(self, client_for, params):
        assert client_for("").get("/attractions/plan", params=params).status_code == 422


class TestGenerateEndpoints:
    def test_ai_trip(self, client_for, trip_reply):
        response = client_for(trip_reply()).post("/trips/generate", json=MUMBAI_BODY)
        assert response.status_code == 200
        body = response.json()
        assert body["source"] == "ai"
        assert body["cached"] is False
        assert body["success"] is True
        trip = body["trip"]
        assert trip["tripSummary"]["destination"] == "Mumbai"
        assert len(trip["itinerary"]) == 3
        assert trip["metadata"]["source"] == "ai"
        assert trip["metadata"]["originalRequest"]["travelerCount"] == 2

    def test_repeat_request_is_cached(self, client_for, trip_reply):
        client = client_for(trip_reply())
        first = client.post("/trips/generate", json=MUMBAI_BODY).json()
        second = client.post("/trips/generate", json=MUMBAI_BODY).json()
        assert second["cached"] is True
        assert second["trip"]["metadata"]["generatedAt"] == first["trip"]["metadata"]["generatedAt"]

    def test_fallback_trip(self, client_for):
        response = client_for("no json here").post("/trips/generate", json=MUMBAI_BODY)
        assert response.status_code == 200
        body = response.json()
        assert body["source"] == "fallback"
        assert body["reason"].startswith("malformed response")
        assert body["trip"]["metadata"]["source"] == "fallback"
        assert body["trip"]["tripSummary"]["budget"] == 15000

    def test_next_level(self, client_for, trip_reply):
        body = dict(MUMBAI_BODY, pace="relaxed")
        response = client_for(trip_reply(day_key="dailyItinerary")).post("/trips/generate/next-level", json=body)
        assert response.status_code == 200
        trip = response.json()["trip"]
        assert trip["metadata"]["variant"] == "next-level"
        assert trip["tripAnalysis"]["paceRating"]
        assert trip["tripSummary"]["attractionPlan"]["total"] == 6

    @pytest.mark.parametrize(
        "override",
        [
            {"duration": 0},
            {"duration": 31},
            {"budget": 0},
            {"travelerCount": 0},
            {"destination": "   "},
            {"pace": "frantic"},
        ],
    )
    def test_invalid_request_rejected(self, client_for, override):
        response = client_for("").post("/trips/generate", json=dict(MUMBAI_BODY, **override))
        assert response.status_code == 422


class TestChatEndpoint:
    def test_chat(self, client_for):
        response = client_for("Try the vada pav at Ashok Vada Pav.").post(
            "/chat", json={"message": "Street food in Mumbai?", "context": {"destination": "Mumbai"}}
        )
        assert response.status_code == 200
        assert response.json() == {"reply": "Try the vada pav at Ashok Vada Pav."}

    def test_empty_message_rejected(self, client_for):
        assert client_for("").post("/chat", json={"message": ""}).status_code == 422
