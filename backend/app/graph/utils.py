import math
import re
from typing import Any, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def normalize_destination(text: str) -> str:
    """Lowercase and drop all whitespace: "New Delhi " -> "newdelhi"."""
    if not text:
        return ""
    return re.sub(r"\s+", "", text).lower()


def parse_amount(value: Any) -> Optional[int]:
    """
    Pull a whole-rupee amount out of model text.

    Accepts plain numbers and strings such as "₹15,000", "Rs. 1,200 per night"
    or "₹10,000-13,000" (first figure wins). Returns None when no finite figure
    is found.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(round(value)) if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    match = re.search(r"\d[\d,]*(?:\.\d+)?", value)
    if not match:
        return None
    try:
        amount = float(match.group(0).replace(",", ""))
        return int(round(amount)) if math.isfinite(amount) else None
    except (OverflowError, ValueError):
        return None


def format_inr(amount: int) -> str:
    return f"₹{amount:,}"


def parse_rating(value: Any) -> Optional[float]:
    """Read ratings like 4.5, "4.5" or "4.5/5". Anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        rating = float(value) if abs(value) < 1e300 else math.inf
    elif isinstance(value, str):
        match = re.search(r"(\d+(?:\.\d+)?)", value)
        if not match:
            return None
        rating = float(match.group(1))
    else:
        return None
    return rating if math.isfinite(rating) else None


def take_cycling(items: List[T], count: int, start: int = 0) -> Iterable[T]:
    """Yield `count` items starting at `start`, wrapping around the list."""
    if not items:
        return
    for offset in range(count):
        yield items[(start + offset) % len(items)]
