# runtime settings read from the environment (.env is honoured for local runs)

from __future__ import annotations
import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

from .errors import ValidationError

DEMO_API_KEY = "demo"
DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5"
UNIT_SYSTEMS = ("metric", "imperial", "standard")


@dataclass(frozen=True)
class Settings:
    api_key: str = DEMO_API_KEY
    base_url: str = DEFAULT_BASE_URL
    units: str = "metric"
    language: str = "en"
    default_city: str = "London"
    timezone: Optional[str] = None
    state_file: Path = Path("~/.weatherlookup.json").expanduser()
    timeout: float = 10.0

    @property
    def demo(self) -> bool:
        return self.api_key == DEMO_API_KEY

    @property
    def tz(self) -> Optional[tzinfo]:
        return ZoneInfo(self.timezone) if self.timezone else None


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    if env is None:
        # in production the variables come from the process environment
        load_dotenv()
        env = os.environ

    units = env.get("WEATHER_UNITS", "metric").strip().lower()
    if units not in UNIT_SYSTEMS:
        raise ValidationError(f"WEATHER_UNITS must be one of {', '.join(UNIT_SYSTEMS)} (got {units!r})")

    timezone = env.get("WEATHER_TIMEZONE", "").strip() or None
    if timezone:
        try:
            ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValidationError(f"Unknown WEATHER_TIMEZONE {timezone!r}") from exc

    raw_timeout = env.get("WEATHER_TIMEOUT", "10")
    try:
        timeout = float(raw_timeout)
    except ValueError as exc:
        raise ValidationError(f"WEATHER_TIMEOUT must be a number (got {raw_timeout!r})") from exc
    if timeout <= 0:
        raise ValidationError(f"WEATHER_TIMEOUT must be positive (got {timeout})")

    return Settings(
        api_key=env.get("OPENWEATHER_API_KEY", "").strip() or DEMO_API_KEY,
        base_url=env.get("OPENWEATHER_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        units=units,
        language=env.get("WEATHER_LANGUAGE", "en").strip() or "en",
        default_city=env.get("WEATHER_DEFAULT_CITY", "London").strip() or "London",
        timezone=timezone,
        state_file=Path(env.get("WEATHER_STATE_FILE", "~/.weatherlookup.json")).expanduser(),
        timeout=timeout,
    )
