import math
from typing import List

from app.models.entities import AttractionPlan
from app.models.trip_request import Pace

# total attractions for the whole trip, by trip length in days
BASE_ATTRACTIONS = {1: 3, 2: 5, 3: 8, 4: 11, 5: 14, 6: 17, 7: 20}

PACE_MULTIPLIERS = {
    "relaxed": 0.7,
    "moderate": 1.0,
    "packed": 1.4,
}

MAX_PER_DAY = 6


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def distribute_attractions(duration: int, total: int) -> List[int]:
    """
    Spread `total` attractions over `duration` days.

    Remainders from the integer split go to the earliest days, and no day gets
    more than MAX_PER_DAY.
    """
    if duration <= 0:
        return []
    base, remainder = divmod(total, duration)
    return [min(base + (1 if day < remainder else 0), MAX_PER_DAY) for day in range(duration)]


def plan_attractions(duration: int, pace: Pace = "moderate") -> AttractionPlan:
    base = BASE_ATTRACTIONS.get(duration, duration * 3)
    total = _round_half_up(base * PACE_MULTIPLIERS[pace])
    per_day = min(math.ceil(total / duration), MAX_PER_DAY) if duration > 0 else 0
    return AttractionPlan(
        total=total,
        per_day=per_day,
        distribution=distribute_attractions(duration, total),
    )
