# connects input (place -> query) to the service and prints current conditions plus the 5-day forecast

from __future__ import annotations
import argparse
import logging
import sys
from datetime import date
from typing import List, Optional, Sequence, TextIO

from .config import Settings, load_settings
from .errors import NotFoundError, TransientError, ValidationError, WeatherAPIError
from .forecast import FORECAST_DAYS, feed_timezone, summarize_forecast
from .models import CurrentConditions, DailySummary
from .service import WeatherService, make_source, normalize_query
from .storage import JsonFilePlaceStore, PlaceStore, initial_place, save_place

logger = logging.getLogger(__name__)

ICONS = {
    "01d": "☀️", "01n": "🌙",
    "02d": "⛅", "02n": "☁️",
    "03d": "☁️", "03n": "☁️",
    "04d": "☁️", "04n": "☁️",
    "09d": "🌧️", "09n": "🌧️",
    "10d": "🌦️", "10n": "🌧️",
    "11d": "⛈️", "11n": "⛈️",
    "13d": "❄️", "13n": "❄️",
    "50d": "🌫️", "50n": "🌫️",
}
DEFAULT_ICON = "🌤️"

TEMP_UNITS = {"metric": "°C", "imperial": "°F", "standard": "K"}
WIND_UNITS = {"metric": "m/s", "imperial": "mph", "standard": "m/s"}

EXIT_OK = 0
EXIT_ERROR = 1
# same code argparse uses for bad arguments
EXIT_USAGE = 2
EXIT_NOT_FOUND = 3


def weather_icon(code: str) -> str:
    return ICONS.get(code, DEFAULT_ICON)


def _fmt(value: Optional[float], suffix: str = "") -> str:
    return "n/a" if value is None else f"{round(value)}{suffix}"


def render_current(current: CurrentConditions, units: str = "metric", today: Optional[date] = None) -> str:
    s = current.sample
    today = today or date.today()
    temp_unit = TEMP_UNITS.get(units, "°C")
    lines = [
        current.display_name,
        f"{today:%A, %B} {today.day}, {today.year}",
        "",
        f"{weather_icon(s.condition)}  {s.description}",
        f"{round(s.temp)}{temp_unit}",
        "",
        f"Feels Like:  {_fmt(s.feels_like, temp_unit)}",
        f"Humidity:    {_fmt(s.humidity, '%')}",
        f"Wind Speed:  {'n/a' if s.wind_speed is None else s.wind_speed} {WIND_UNITS.get(units, 'm/s')}",
        f"Pressure:    {_fmt(s.pressure, ' hPa')}",
    ]
    return "\n".join(lines)


def render_forecast(days: Sequence[DailySummary]) -> str:
    lines = [f"{FORECAST_DAYS}-Day Forecast"]
    for day in days:
        lines.append(
            f"{day.label:<12} {weather_icon(day.condition)}  "
            f"{round(day.temp_max)}° / {round(day.temp_min)}°  {day.description}"
        )
    return "\n".join(lines)


def render_not_found(place: str) -> str:
    return "\n".join([
        "City Not Found",
        f'"{place}"',
        "Sorry, we couldn't find the city you're looking for.",
        "Please check the spelling and try again.",
        "",
        "Suggestions:",
        "  - Check the spelling of the city name",
        '  - Try using the country name (e.g., "London, UK")',
        "  - Use the full city name",
    ])


def run(
    place: Optional[str],
    settings: Settings,
    service: WeatherService,
    store: PlaceStore,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    out = out or sys.stdout
    err = err or sys.stderr
    try:
        query = normalize_query(place)
    except ValidationError as exc:
        print(str(exc), file=err)
        return EXIT_USAGE

    logger.debug("Looking up %r", query)
    try:
        current, feed = service.fetch_weather(query)
        print(render_current(current, settings.units), file=out)
        print(file=out)
        if feed is None:
            print("Forecast unavailable.", file=out)
        else:
            days = summarize_forecast(feed, tz=feed_timezone(feed, settings.tz))
            print(render_forecast(days), file=out)
    except NotFoundError:
        print(render_not_found(query), file=out)
        return EXIT_NOT_FOUND
    except TransientError as exc:
        # upstream detail goes to the log, the user gets the generic message
        logger.info("Weather lookup for %r failed: %s", query, exc.message)
        print(TransientError.default_message, file=err)
        return EXIT_ERROR
    except (WeatherAPIError, ValidationError) as exc:
        print(str(exc), file=err)
        return EXIT_ERROR

    # the typed query is kept, the provider's resolved name drops qualifiers like "UK"
    save_place(store, query)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="weatherlookup", description="Current weather and 5-day forecast for a city.")
    parser.add_argument("place", nargs="?", help="city name, optionally with a country (e.g. 'London, UK')")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    try:
        settings = load_settings()
        source = make_source(settings)
    except (ValidationError, WeatherAPIError) as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_ERROR

    store = JsonFilePlaceStore(settings.state_file)
    place = args.place if args.place is not None else initial_place(store, settings.default_city)
    with WeatherService(source) as service:
        return run(place, settings, service, store)


if __name__ == "__main__":
    sys.exit(main())
