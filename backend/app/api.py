import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from app.config import Settings
from app.main import format_result
from app.models.entities import AttractionPlan
from app.models.trip_request import Pace, TripRequest
from app.services.trip_service import TripGenerationService

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)
    # Missing model credentials raise IntegrationError here and abort startup
    app.state.trip_service = TripGenerationService.from_settings(settings)
    logger.info(f"Trip service ready (provider={settings.llm_provider})")
    yield


app = FastAPI(
    title="TripCraft Backend API",
    description="AI-powered India trip itineraries with offline fallback",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure this properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_trip_service(request: Request) -> TripGenerationService:
    return request.app.state.trip_service


class TripResponse(BaseModel):
    trip: dict
    source: str
    cached: bool = False
    reason: Optional[str] = None
    logs: List[dict] = []
    success: bool = True
    message: str = "Trip generated successfully"


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    context: Dict[str, Any] = {}


class ChatResponse(BaseModel):
    reply: str


@app.get("/")
def root():
    return {
        "message": "TripCraft Backend API",
        "version": "1.0.0",
        "endpoints": {
            "health": "/health",
            "destinations": "/destinations",
            "attraction_plan": "/attractions/plan",
            "generate_trip": "/trips/generate",
            "generate_next_level_trip": "/trips/generate/next-level",
            "chat": "/chat",
            "docs": "/docs",
        },
    }


@app.get("/health")
def health():
    return {"status": "healthy", "service": "TripCraft Backend"}


@app.get("/destinations")
def destinations(service: TripGenerationService = Depends(get_trip_service)):
    """Destinations with curated attraction data."""
    catalog = service.catalog
    return {
        "destinations": [
            {
                "key": key,
                "name": catalog.get(key).name,
                "state": catalog.get(key).state,
                "attractions": len(catalog.get(key).attractions),
                "restaurants": len(catalog.get(key).restaurants),
            }
            for key in catalog.keys()
        ]
    }


@app.get("/attractions/plan", response_model=AttractionPlan, response_model_by_alias=True)
def attraction_plan(
    duration: int = Query(..., ge=1, le=30),
    pace: Pace = "moderate",
    service: TripGenerationService = Depends(get_trip_service),
):
    return service.plan_attractions(duration, pace)


@app.post("/trips/generate", response_model=TripResponse)
async def generate_trip(request: TripRequest, service: TripGenerationService = Depends(get_trip_service)):
    """
    Generate a day-by-day itinerary.

    - **destination**: Indian city or region (e.g. "Mumbai")
    - **duration**: Number of days (1-30)
    - **travelerCount**: Number of travelers (default: 2)
    - **budget**: Total budget in INR
    - **interests**: Ordered list of interests (e.g. ["history", "food"])

    Always returns a trip; `source` tells whether the model wrote it or the
    local fallback did.
    """
    try:
        result = await service.generate_trip(request)
    except Exception as e:
        logger.error(f"Error generating trip: {e}")
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
    return format_result(result)


@app.post("/trips/generate/next-level", response_model=TripResponse)
async def generate_next_level_trip(request: TripRequest, service: TripGenerationService = Depends(get_trip_service)):
    """Pace-aware itinerary with attraction distribution and trip analysis."""
    try:
        result = await service.generate_next_level_trip(request)
    except Exception as e:
        logger.error(f"Error generating next-level trip: {e}")
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
    return format_result(result)


@app.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, service: TripGenerationService = Depends(get_trip_service)):
    reply = await service.generate_chat_reply(request.message, request.context)
    return ChatResponse(reply=reply)
