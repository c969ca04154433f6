# models to keep data shapes explicit and immutable across the app

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class WeatherSample:
    # one point-in-time measurement, timestamp is UTC epoch seconds
    timestamp: int
    temp: float
    temp_max: float
    temp_min: float
    condition: str  # provider icon code, e.g. "02d"
    description: str
    humidity: Optional[float] = None
    pressure: Optional[float] = None
    wind_speed: Optional[float] = None
    feels_like: Optional[float] = None


@dataclass(frozen=True)
class ForecastFeed:
    samples: Tuple[WeatherSample, ...]
    # reporting timezone offset in seconds, when the provider sends one
    utc_offset: Optional[int] = None

    def __iter__(self) -> Iterator[WeatherSample]:
        return iter(self.samples)

    def __len__(self) -> int:
        return len(self.samples)


@dataclass(frozen=True)
class CurrentConditions:
    place: str
    country: str
    sample: WeatherSample

    @property
    def display_name(self) -> str:
        return f"{self.place}, {self.country}" if self.country else self.place


@dataclass(frozen=True)
class DailySummary:
    date: date
    temp_max: float
    temp_min: float
    condition: str
    description: str

    @property
    def label(self) -> str:
        # fixed en-US style, e.g. "Mon, Oct 20"
        return f"{self.date:%a, %b} {self.date.day}"
