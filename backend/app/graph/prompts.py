"""
Prompt construction for trip generation.

Prompts are plain text rendered from the request plus whatever reference data
the catalog holds for the destination. When attractions are known, the model
is told to use only those names; nothing enforces it beyond the parser's
schema check.
"""

import json
import random
from typing import Any, Dict, List, Optional

from app.data.catalog import sample_attractions
from app.graph.utils import format_inr
from app.models.attractions import DestinationRecord
from app.models.entities import AttractionPlan
from app.models.trip_request import TripRequest

PLACE_IMAGE_URL = "https://images.unsplash.com/photo-1506905925346-21bda4d32df4"
HOTEL_IMAGE_URL = "https://images.unsplash.com/photo-1571896349842-33c89424de2d"

# famous landmarks per city/state, used when the catalog has no attraction list
DESTINATION_LANDMARKS = {
    "mumbai": "Gateway of India (iconic monument), Marine Drive (Queen's Necklace), Chhatrapati Shivaji Terminus (heritage railway station), Elephanta Caves (UNESCO site), Juhu Beach, Haji Ali Dargah (mosque in sea), Siddhivinayak Temple, Crawford Market, Bandra-Worli Sea Link, Colaba Causeway, Hanging Gardens, Chowpatty Beach, Dhobi Ghat",
    "delhi": "Red Fort, India Gate, Qutub Minar, Lotus Temple, Humayun's Tomb, Jama Masjid, Chandni Chowk, Akshardham Temple, Raj Ghat, Connaught Place, Lodi Gardens, National Museum, Purana Qila, Jantar Mantar, Hauz Khas Village",
    "kolkata": "Victoria Memorial, Howrah Bridge, Dakshineswar Temple, Park Street, Kalighat Temple, Indian Museum, College Street, Kumartuli Potter's Quarter, Belur Math, Marble Palace, New Market",
    "bangalore": "Bangalore Palace, Lalbagh Botanical Garden, Cubbon Park, ISKCON Temple, Bull Temple, Tipu Sultan's Summer Palace, MG Road, Vidhana Soudha, KR Market, Ulsoor Lake, Bannerghatta National Park",
    "ranchi": "Hundru Falls, Rock Garden, Jagannath Temple, Birsa Zoological Park, Jonha Falls, Dassam Falls, Kanke Dam, Tagore Hill, Pahari Mandir",
    "bhubaneswar": "Lingaraj Temple, Khandagiri Caves, Udayagiri Caves, Nandankanan Zoo, Mukteshwar Temple, Rajarani Temple, Dhauli Peace Pagoda, Odisha State Museum",
    "guwahati": "Kamakhya Temple, Umananda Temple, Brahmaputra River Cruise, Assam State Museum, Navagraha Temple, Basistha Ashram, Pobitora Wildlife Sanctuary",
    "goa": "Baga Beach, Basilica of Bom Jesus, Fort Aguada, Dudhsagar Falls, Anjuna Beach, Calangute Beach, Se Cathedral, Chapora Fort, Spice Plantations",
    "kerala": "Alleppey Backwaters, Munnar Tea Gardens, Fort Kochi, Periyar Wildlife Sanctuary, Kumarakom, Thekkady, Chinese Fishing Nets, Mattancherry Palace",
    "agra": "Taj Mahal, Agra Fort, Mehtab Bagh, Itmad-ud-Daulah, Fatehpur Sikri, Akbar's Tomb, Chini Ka Rauza",
    "jaipur": "Hawa Mahal, City Palace, Amber Fort, Jantar Mantar, Nahargarh Fort, Jaigarh Fort, Albert Hall Museum, Birla Mandir",
    "varanasi": "Dashashwamedh Ghat, Kashi Vishwanath Temple, Sarnath, Manikarnika Ghat, Assi Ghat, Ramnagar Fort",
    "udaipur": "City Palace, Lake Pichola, Jagdish Temple, Saheliyon Ki Bari, Jag Mandir, Fateh Sagar Lake",
    "rajasthan": "Hawa Mahal, City Palace, Amber Fort, Lake Pichola, Mehrangarh Fort, Jaisalmer Fort, Pushkar Lake, Ranthambore National Park",
    "darjeeling": "Tiger Hill, Darjeeling Himalayan Railway, Peace Pagoda, Batasia Loop, Happy Valley Tea Estate",
    "manali": "Rohtang Pass, Solang Valley, Hadimba Temple, Vashisht Hot Springs, Old Manali, Manu Temple",
    "shimla": "Mall Road, Christ Church, Jakhu Temple, Kufri, Summer Hill, The Ridge",
    "kashmir": "Dal Lake, Gulmarg, Pahalgam, Sonamarg, Shalimar Bagh, Nishat Bagh",
    "ladakh": "Leh Palace, Pangong Lake, Nubra Valley, Magnetic Hill, Thiksey Monastery",
    "andaman": "Radhanagar Beach, Cellular Jail, Ross Island, Neil Island, Baratang Island",
    "punjab": "Golden Temple, Jallianwala Bagh, Wagah Border, Anandpur Sahib, Patiala Palace",
}

GENERIC_LANDMARKS = "famous local attractions, temples, markets, and cultural sites"

MUMBAI_TEMPLATE = """
MUMBAI 3-DAY TEMPLATE (Use as reference for structure and quality):

Day 1: Heritage & Sea Views
Morning: Gateway of India -> Elephanta Caves ferry
Lunch: Leopold Cafe (Continental & Indian, ₹800 for 2)
Afternoon: Chhatrapati Shivaji Museum -> Colaba Causeway shopping
Evening: Marine Drive sunset -> Chowpatty Beach street food

Day 2: Culture & Temples
Morning: Siddhivinayak Temple -> Haji Ali Dargah
Lunch: Aaswad (Maharashtrian thali, ₹600 for 2)
Afternoon: CST heritage station -> Kala Ghoda Art District
Evening: Bandra-Worli Sea Link -> Bandra Bandstand

Day 3: Modern Mumbai & Local Life
Morning: Dhobi Ghat -> Juhu Beach
Lunch: Sea Lounge, Taj (₹2000 for 2) or Juhu street food (₹400 for 2)
Afternoon: Film City tour OR Phoenix Mall shopping
Evening: Worli Sea Face -> Rooftop dining

Budget: ₹10,000-13,000 for 2 people (excluding hotel)
"""

PACE_DESCRIPTIONS = {
    "relaxed": "Fewer spots, more time",
    "moderate": "Balanced experience",
    "packed": "More spots, efficient timing",
}


def destination_landmarks(destination: str) -> str:
    """Landmark hint for destinations the catalog doesn't cover."""
    lowered = destination.strip().lower()
    if not lowered:
        return GENERIC_LANDMARKS
    for key, landmarks in DESTINATION_LANDMARKS.items():
        if key in lowered or lowered in key:
            return landmarks
    return GENERIC_LANDMARKS


def city_template(destination: str, duration: int) -> str:
    if "mumbai" in destination.lower() and duration >= 3:
        return MUMBAI_TEMPLATE
    return ""


def _attraction_lines(record: DestinationRecord, count: int, rng: Optional[random.Random]) -> str:
    return "\n".join(
        f"{a.name} ({a.category}) - {a.description} [Entry: {a.entry_fee}, Timing: {a.opening_hours}]"
        for a in sample_attractions(record.attractions, count, rng)
    )


def _restaurant_lines(record: DestinationRecord) -> str:
    return "\n".join(
        f"{r.name} ({r.cuisine}) - {r.must_try or 'local specialities'} [Cost: {r.cost or 'varies'}]"
        for r in record.restaurants
    )


def _interests_text(interests: List[str]) -> str:
    return ", ".join(interests) or "General sightseeing"


def _trip_schema_example(request: TripRequest) -> Dict[str, Any]:
    budget = format_inr(request.budget)
    return {
        "tripSummary": {
            "destination": request.destination,
            "duration": request.duration,
            "travelers": f"{request.traveler_count} people",
            "budget": budget,
            "currency": "INR",
            "totalEstimatedCost": "₹[calculated_cost]",
            "bestTime": "[best_time_to_visit]",
            "highlights": ["highlight1", "highlight2", "highlight3"],
        },
        "hotels": [
            {
                "hotelName": "[hotel_name]",
                "hotelAddress": "[address]",
                "price": "₹[price] per night",
                "hotelImageUrl": HOTEL_IMAGE_URL,
                "geoCoordinates": {"lat": 18.922, "lng": 72.8347},
                "rating": 4.3,
                "description": "[description]",
            }
        ],
        "itinerary": [
            {
                "day": 1,
                "theme": "Heritage & Sea Views",
                "morning": {
                    "time": "9:00 AM - 12:00 PM",
                    "activities": [
                        {
                            "placeName": "Gateway of India",
                            "placeDetails": "Iconic photo spot and historic monument",
                            "placeImageUrl": PLACE_IMAGE_URL,
                            "geoCoordinates": {"lat": 18.922, "lng": 72.8347},
                            "ticketPricing": "Free entry",
                            "rating": 4.5,
                            "timeToTravel": "30 mins from hotel",
                            "bestTimeToVisit": "Early morning for fewer crowds",
                            "insiderTip": "Best photo spot is from the steps facing the sea",
                        }
                    ],
                },
                "lunch": {
                    "time": "12:30 PM - 2:00 PM",
                    "restaurant": {
                        "name": "Leopold Café",
                        "cuisine": "Continental & Indian",
                        "location": "Colaba Causeway",
                        "averageCost": "₹800 for 2 people",
                        "mustTry": "Chicken Tikka, Fish & Chips",
                        "geoCoordinates": {"lat": 18.9067, "lng": 72.8311},
                    },
                },
                "afternoon": {"time": "2:00 PM - 6:00 PM", "activities": ["..."]},
                "evening": {"time": "6:00 PM - 9:00 PM", "activities": ["..."]},
            }
        ],
        "budgetBreakdown": {
            "totalBudget": budget,
            "dailyBreakdown": {
                "food": "₹[amount] per day",
                "transport": "₹[amount] per day",
                "activities": "₹[amount] per day",
                "shopping": "₹[amount] per day (optional)",
            },
            "totalEstimated": "₹[amount] (excluding accommodation)",
            "budgetTips": ["tip1", "tip2"],
        },
        "travelTips": {
            "transportation": ["tip"],
            "food": ["tip"],
            "general": ["tip"],
            "photography": ["tip"],
        },
        "localExperiences": ["experience1", "experience2"],
    }


def build_trip_prompt(
    request: TripRequest,
    record: Optional[DestinationRecord] = None,
    rng: Optional[random.Random] = None,
) -> str:
    destination = request.destination
    duration = request.duration

    if record is not None and record.attractions:
        places_block = f"""
MUST-VISIT ATTRACTIONS FOR {destination.upper()}:
{_attraction_lines(record, duration * 4, rng)}

RECOMMENDED RESTAURANTS:
{_restaurant_lines(record)}

CRITICAL: Use ONLY these real places, NOT generic descriptions like "heritage site" or "cultural center"
"""
    else:
        places_block = f"""
- Use REAL, SPECIFIC places (not generic "cultural center" or "heritage site")
- Include FAMOUS landmarks: {destination_landmarks(destination)}
"""

    template = city_template(destination, duration)
    template_block = f"REFERENCE TEMPLATE FOR QUALITY:\n{template}" if template else ""
    schema = json.dumps(_trip_schema_example(request), indent=2, ensure_ascii=False)

    return f"""
You are an expert Indian travel planner with 15+ years of experience. Create a DETAILED, POLISHED {duration}-day trip itinerary for {destination} for {request.traveler_count} people with a budget of {format_inr(request.budget)}.

CRITICAL REQUIREMENTS:
1. Each day must have COMPLETELY DIFFERENT places - NO REPETITION across days
2. Include SPECIFIC timings (Morning 9:00 AM, Afternoon 2:00 PM, Evening 6:00 PM)
3. Use EXACT place names with brief descriptions
4. Include SPECIFIC restaurant recommendations for meals
5. Provide PRACTICAL information: entry fees, travel time, best photo spots
6. Each day should have a UNIQUE THEME with 4-6 activities
7. Include a BUDGET BREAKDOWN and INSIDER TIPS

PLACE SELECTION:
{places_block}
- Mix ICONIC attractions with HIDDEN GEMS
- Structure every day as Morning -> Lunch -> Afternoon -> Evening

Interests: {_interests_text(request.interests)}

Return exactly {duration} days in "itinerary".
Return JSON only. Do not include code fences, Markdown, or explanations.
The response must be a single valid JSON object following this example:
{schema}

FINAL INSTRUCTIONS:
1. NEVER use generic terms like "heritage site", "cultural center", "local market"
2. If specific attractions are provided, use ONLY those places - do not invent new ones
3. All prices in Indian Rupees and realistic for the destination and budget
4. Use the coordinates provided in the attraction list

{template_block}
""".strip()


def build_next_level_prompt(
    request: TripRequest,
    plan: AttractionPlan,
    record: Optional[DestinationRecord] = None,
    rng: Optional[random.Random] = None,
) -> str:
    destination = request.destination
    travelers = request.traveler_count
    budget = format_inr(request.budget)
    distribution = ", ".join(str(n) for n in plan.distribution)
    first_day = plan.distribution[0] if plan.distribution else plan.per_day

    if record is not None and record.attractions:
        attractions = _attraction_lines(record, plan.total * 2, rng)
        restaurants = _restaurant_lines(record) or "Include authentic local restaurants with specific dishes and costs"
    else:
        attractions = "Research and use REAL, FAMOUS attractions for this destination"
        restaurants = "Include authentic local restaurants with specific dishes and costs"

    example_day = {
        "day": 1,
        "theme": "Heritage & Iconic Landmarks",
        "attractionsCount": first_day,
        "schedule": {
            "morning": {
                "time": "9:00 AM - 12:00 PM",
                "places": [
                    {
                        "placeName": "Exact Place Name",
                        "placeDetails": "Why famous, historical context, what to see",
                        "placeImageUrl": PLACE_IMAGE_URL,
                        "geoCoordinates": {"lat": 0.0, "lng": 0.0},
                        "ticketPricing": "₹amount per person",
                        "rating": 4.5,
                        "timeToTravel": "30 minutes from hotel",
                        "bestTimeToVisit": "morning for fewer crowds",
                        "duration": "2 hours",
                        "insiderTips": "local secrets",
                        "type": "heritage/religious/nature/cultural",
                    }
                ],
                "transport": {"from": "hotel", "mode": "taxi/metro/walk", "duration": "30 minutes", "cost": "₹amount"},
            },
            "lunch": {
                "time": "12:30 PM - 2:00 PM",
                "restaurant": {
                    "name": "Specific Restaurant Name",
                    "cuisine": "Local/Continental",
                    "location": "Near attraction",
                    "cost": f"₹amount for {travelers} people",
                    "mustTry": ["dish 1", "dish 2"],
                    "ambiance": "description",
                },
            },
            "afternoon": {"time": "2:00 PM - 6:00 PM", "places": ["..."]},
            "evening": {"time": "6:00 PM - 9:00 PM", "places": ["..."]},
        },
        "dailyBudget": {"attractions": "₹amount", "food": "₹amount", "transport": "₹amount", "total": "₹amount"},
        "travelOptimization": {"totalDistance": "X km", "totalTravelTime": "X hours", "recommendedTransport": "primary mode"},
    }
    schema = json.dumps(
        {
            "tripSummary": {
                "destination": destination,
                "duration": request.duration,
                "travelers": travelers,
                "totalBudget": budget,
                "pace": request.pace,
                "totalAttractions": plan.total,
                "highlights": ["top 3 experiences"],
                "bestTime": "best season to visit",
                "tripMood": "adventure/cultural/relaxed/foodie",
            },
            "dailyItinerary": [example_day],
            "budgetBreakdown": {
                "totalEstimated": "₹amount",
                "dailyAverage": "₹amount",
                "categories": {"attractions": "₹amount (X%)", "food": "₹amount (X%)", "transport": "₹amount (X%)"},
                "budgetTips": ["money-saving suggestions"],
            },
            "travelTips": {
                "transportation": ["tip"],
                "food": ["tip"],
                "culture": ["tip"],
                "weather": ["tip"],
                "safety": ["tip"],
                "photography": ["tip"],
            },
            "localExperiences": ["unique local activities", "hidden gems only locals know"],
        },
        indent=2,
        ensure_ascii=False,
    )

    return f"""
You are a world-class travel expert creating a NEXT-LEVEL {request.duration}-day trip to {destination} for {travelers} people with {budget} budget.

TRIP SPECIFICATIONS:
- Duration: {request.duration} days
- Travelers: {travelers} people
- Budget: {budget}
- Pace: {request.pace} ({PACE_DESCRIPTIONS[request.pace]})
- Total Attractions: {plan.total}
- Per Day Distribution: {distribution} attractions

SPECIFIC ATTRACTIONS TO USE:
{attractions}

RESTAURANT RECOMMENDATIONS:
{restaurants}

REQUIREMENTS:
1. Use EXACT place names with historical context, best visiting times and photo spots
2. Entry fees, transport costs, meal costs and a daily total for every day
3. Travel time and best transport mode between spots, optimised route
4. Specific restaurants near each attraction with must-try dishes and prices
5. Personalise for interests: {_interests_text(request.interests)}
   Preferences: {json.dumps(request.preferences, ensure_ascii=False, default=str)}
6. Specific time slots with buffer time for travel and meals

PLACE DISTRIBUTION RULE:
- Morning: 1-2 places, Afternoon: 2-3 places, Evening: 1-2 places
- Day totals must follow the distribution {distribution} for days 1, 2, 3... respectively
- NEVER repeat the same place on multiple days

Return exactly {request.duration} days in "dailyItinerary".
Return JSON only. Do not include code fences, Markdown, or explanations.
Use this EXACT JSON format:
{schema}
""".strip()


def build_chat_prompt(message: str, context: Optional[Dict[str, Any]] = None) -> str:
    return f"""
You are a friendly Indian travel assistant. Respond to the user's travel query in a helpful and informative way.

User Message: "{message}"
Context: {json.dumps(context or {}, ensure_ascii=False, default=str)}

Guidelines:
- Be conversational and friendly
- Focus on Indian destinations and experiences
- Provide practical and actionable advice
- Keep responses concise but informative
- Include specific recommendations when possible

Respond naturally as a travel expert would.
""".strip()
