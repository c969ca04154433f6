# orchestration and business rules
# parse_* turn provider payloads into typed value objects, WeatherService runs the two fetches concurrently

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Dict, Optional, Tuple

from .client import WeatherAPIClient, WeatherSource
from .config import Settings
from .errors import TransientError, ValidationError
from .models import CurrentConditions, ForecastFeed, WeatherSample
from .synthetic import SyntheticWeatherSource

logger = logging.getLogger(__name__)


def normalize_query(query: Optional[str]) -> str:
    place = (query or "").strip()
    if not place:
        raise ValidationError("Please enter a city name")
    return place


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _parse_sample(item: Dict[str, Any], ts: Any = None) -> WeatherSample:
    main = item["main"]
    weather = item["weather"][0]
    temp = float(main["temp"])
    ts = item["dt"] if ts is None else ts
    if isinstance(ts, bool) or not isinstance(ts, (int, float)):
        raise TypeError(f"timestamp must be numeric (got {ts!r})")
    if isinstance(ts, float) and not ts.is_integer():
        raise ValueError(f"timestamp must be whole epoch seconds (got {ts!r})")
    return WeatherSample(
        timestamp=int(ts),
        temp=temp,
        # current conditions may omit the range, a point reading is its own max/min
        temp_max=float(main.get("temp_max", temp)),
        temp_min=float(main.get("temp_min", temp)),
        condition=str(weather.get("icon", "")),
        description=str(weather.get("description", "")),
        humidity=_optional_float(main.get("humidity")),
        pressure=_optional_float(main.get("pressure")),
        wind_speed=_optional_float((item.get("wind") or {}).get("speed")),
        feels_like=_optional_float(main.get("feels_like")),
    )


def parse_current(data: Dict[str, Any], fallback_name: str = "") -> CurrentConditions:
    # OpenWeatherMap shape: data["main"]["temp"], data["weather"][0]["icon"], data["sys"]["country"]
    try:
        sample = _parse_sample(data, ts=data.get("dt", 0))
        return CurrentConditions(
            place=str(data.get("name") or fallback_name),
            country=str((data.get("sys") or {}).get("country") or ""),
            sample=sample,
        )
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
        raise TransientError(f"Malformed current conditions payload: {exc!r}") from exc


def parse_forecast(data: Dict[str, Any]) -> ForecastFeed:
    # OpenWeatherMap shape: data["list"][i]["main"]["temp_max"], data["city"]["timezone"]
    try:
        samples = tuple(_parse_sample(item) for item in data["list"])
        offset = (data.get("city") or {}).get("timezone")
        return ForecastFeed(samples=samples, utc_offset=None if offset is None else int(offset))
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
        raise TransientError(f"Malformed forecast payload: {exc!r}") from exc


def make_source(settings: Settings) -> WeatherSource:
    # chosen once, the service never branches on the key again
    if settings.demo:
        logger.info("Using synthetic weather data (demo API key)")
        return SyntheticWeatherSource(tz=settings.tz)
    return WeatherAPIClient(
        api_key=settings.api_key,
        base_url=settings.base_url,
        units=settings.units,
        language=settings.language,
        timeout=settings.timeout,
    )


class WeatherService:
    # owns the two fetch workers for its whole life, close() also releases the source

    def __init__(self, source: WeatherSource):
        self.source = source
        self._pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="weather-fetch")

    def close(self) -> None:
        self._pool.shutdown(wait=True)
        self.source.close()

    def __enter__(self) -> WeatherService:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch_current(self, query: str) -> CurrentConditions:
        place = normalize_query(query)
        return parse_current(self.source.get_current(place), fallback_name=place)

    def fetch_forecast(self, query: str) -> Optional[ForecastFeed]:
        place = normalize_query(query)
        payload = self.source.get_forecast(place)
        if payload is None:
            return None
        return parse_forecast(payload)

    def fetch_weather(self, query: str) -> Tuple[CurrentConditions, Optional[ForecastFeed]]:
        place = normalize_query(query)

        current_fut = self._pool.submit(self.fetch_current, place)
        forecast_fut = self._pool.submit(self.fetch_forecast, place)
        # both settle before anything is raised, so no fetch outlives the call
        wait([current_fut, forecast_fut])
        # current conditions are resolved first so their error wins when both fail
        current = current_fut.result()
        forecast = forecast_fut.result()

        logger.info(
            "Fetched weather for %r: %s, %s forecast samples",
            place, current.display_name, len(forecast) if forecast is not None else "no",
        )
        return current, forecast
