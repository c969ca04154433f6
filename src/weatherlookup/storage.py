# remembers the last searched place between runs
# persistence is best effort, a broken store never interrupts a lookup

from __future__ import annotations
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

LAST_PLACE_KEY = "last_searched_city"


class PlaceStore(ABC):

    @abstractmethod
    def get(self) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, place: str) -> None:
        ...


class MemoryPlaceStore(PlaceStore):

    def __init__(self, place: Optional[str] = None):
        self._place = place

    def get(self) -> Optional[str]:
        return self._place

    def set(self, place: str) -> None:
        self._place = place


class JsonFilePlaceStore(PlaceStore):
    # small json document so other keys can live next to the place later

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self) -> Optional[str]:
        place = self._read().get(LAST_PLACE_KEY)
        return place if isinstance(place, str) and place.strip() else None

    def set(self, place: str) -> None:
        data = self._read()
        data[LAST_PLACE_KEY] = place
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save last searched city to %s: %s", self.path, exc)


def initial_place(store: PlaceStore, default: Optional[str]) -> Optional[str]:
    try:
        return store.get() or default
    except Exception as exc:  # custom stores included, reading is never fatal
        logger.warning("Could not load last searched city: %s", exc)
        return default


def save_place(store: PlaceStore, place: str) -> None:
    try:
        store.set(place)
    except Exception as exc:
        logger.warning("Could not save last searched city: %s", exc)
