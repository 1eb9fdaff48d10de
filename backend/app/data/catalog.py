"""
Static attraction and restaurant reference data, keyed by destination.

The dataset ships as attractions.json next to this module and is read once per
process. Records are frozen; nothing here mutates after load.
"""

import json
import logging
import random
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from app.graph.utils import normalize_destination
from app.models.attractions import AttractionRecord, DestinationRecord

logger = logging.getLogger(__name__)

DATA_FILE = Path(__file__).with_name("attractions.json")


class AttractionCatalog:
    def __init__(self, destinations: Dict[str, DestinationRecord]):
        # insertion order matters: lookups return the first matching key
        self._destinations = dict(destinations)

    @classmethod
    def from_file(cls, path: Path = DATA_FILE) -> "AttractionCatalog":
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
        destinations = {
            key: DestinationRecord(key=key, **value)
            for key, value in raw.items()
        }
        logger.info(f"Loaded attraction catalog with {len(destinations)} destinations from {path.name}")
        return cls(destinations)

    def __len__(self) -> int:
        return len(self._destinations)

    def keys(self) -> List[str]:
        return list(self._destinations)

    def get(self, key: str) -> Optional[DestinationRecord]:
        return self._destinations.get(key)

    def find(self, destination: str) -> Optional[DestinationRecord]:
        """
        Look a destination up by name.

        The name is lowercased and stripped of whitespace. An exact key wins;
        otherwise the first key that contains (or is contained in) the name is
        returned, in catalog order. "New Delhi" therefore resolves to delhi,
        and "Navi Mumbai" to mumbai.
        """
        dest_key = normalize_destination(destination)
        if not dest_key:
            return None

        if dest_key in self._destinations:
            return self._destinations[dest_key]

        lowered = destination.strip().lower()
        for key, record in self._destinations.items():
            if key in dest_key or dest_key in key or lowered in record.name.lower():
                return record
        return None


def sample_attractions(
    attractions: List[AttractionRecord],
    count: int,
    rng: Optional[random.Random] = None,
) -> List[AttractionRecord]:
    """Random subset of up to `count` attractions, for variety between runs."""
    rng = rng or random.Random()
    shuffled = list(attractions)
    rng.shuffle(shuffled)
    return shuffled[:max(count, 0)]


@lru_cache(maxsize=1)
def default_catalog() -> AttractionCatalog:
    return AttractionCatalog.from_file()
