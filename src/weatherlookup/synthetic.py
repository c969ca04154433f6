# offline stand-in for the live API, selected by the "demo" api key
# payloads have the same shape as the provider's so the service cannot tell the difference

from __future__ import annotations
import logging
import math
import random
import threading
import time
from datetime import datetime, time as dt_time, timedelta, timezone, tzinfo
from typing import Any, Callable, Dict, List, Optional

from .client import WeatherSource
from .forecast import FORECAST_DAYS

logger = logging.getLogger(__name__)

CURRENT_DELAY = 1.0
FORECAST_DELAY = 0.5
SAMPLES_PER_DAY = 8
STEP_HOURS = 3
BASE_TEMP = 22

# (description, icon, temperature swing around the day temperature)
CONDITIONS = (
    ("sunny", "01d", 8),
    ("partly cloudy", "02d", 6),
    ("cloudy", "03d", 4),
    ("light rain", "10d", 2),
    ("overcast", "04d", 3),
)


class SyntheticWeatherSource(WeatherSource):

    def __init__(
        self,
        tz: tzinfo | None = None,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
        now: Callable[[], datetime] | None = None,
        current_delay: float = CURRENT_DELAY,
        forecast_delay: float = FORECAST_DELAY,
    ):
        self.tz = tz or timezone.utc
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.now = now or (lambda: datetime.now(timezone.utc))
        self.current_delay = current_delay
        self.forecast_delay = forecast_delay
        # serializes draws from the two fetch threads
        self._lock = threading.Lock()

    def get_current(self, query: str) -> Dict[str, Any]:
        self.sleep(self.current_delay)
        with self._lock:
            r = self.rng
            payload = {
                "name": query,
                "sys": {"country": ""},
                "dt": int(self.now().timestamp()),
                "weather": [{"description": "partly cloudy", "icon": "02d"}],
                "main": {
                    "temp": r.randint(10, 40),
                    "feels_like": r.randint(10, 40),
                    "humidity": r.randint(40, 80),
                    "pressure": r.randint(1000, 1200),
                },
                "wind": {"speed": r.randint(2, 12)},
            }
        logger.debug("Synthetic current conditions for %r: %s", query, payload["main"])
        return payload

    def get_forecast(self, query: str) -> Optional[Dict[str, Any]]:
        self.sleep(self.forecast_delay)
        now = self.now().astimezone(self.tz)
        today = now.date()
        samples: List[Dict[str, Any]] = []

        with self._lock:
            r = self.rng
            # today's remaining slots are the partial first day, then FORECAST_DAYS full days
            for offset in range(FORECAST_DAYS + 1):
                day = today + timedelta(days=offset)
                description, icon, swing = r.choice(CONDITIONS)
                day_temp = BASE_TEMP + (r.random() - 0.5) * 10
                temp_max = round(day_temp + swing + r.random() * 3)
                temp_min = round(day_temp - swing - r.random() * 3)
                midnight = datetime.combine(day, dt_time.min, tzinfo=self.tz)

                for slot in range(SAMPLES_PER_DAY):
                    at = midnight + timedelta(hours=slot * STEP_HOURS)
                    if offset == 0 and at + timedelta(hours=STEP_HOURS) <= now:
                        continue
                    hour_temp = temp_min + (temp_max - temp_min) * (0.3 + 0.4 * math.sin(slot * math.pi / 7))
                    samples.append({
                        "dt": int(at.timestamp()),
                        "main": {"temp": round(hour_temp), "temp_max": temp_max, "temp_min": temp_min},
                        "weather": [{"description": description, "icon": icon}],
                    })

        utc_offset = now.utcoffset()
        logger.debug("Synthetic forecast for %r: %d samples", query, len(samples))
        return {
            "list": samples,
            "city": {
                "name": query,
                "country": "",
                "timezone": int(utc_offset.total_seconds()) if utc_offset is not None else 0,
            },
        }
