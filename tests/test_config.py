from pathlib import Path

import pytest

from weatherlookup.config import DEFAULT_BASE_URL, load_settings
from weatherlookup.errors import ValidationError


def test_defaults_select_demo_mode():
    settings = load_settings({})

    assert settings.demo
    assert settings.base_url == DEFAULT_BASE_URL
    assert (settings.units, settings.language, settings.default_city) == ("metric", "en", "London")
    assert settings.tz is None
    assert settings.timeout == 10.0


def test_values_from_environment(tmp_path):
    settings = load_settings({
        "OPENWEATHER_API_KEY": " abc123 ",
        "OPENWEATHER_BASE_URL": "https://proxy.test/owm/",
        "WEATHER_UNITS": "Imperial",
        "WEATHER_LANGUAGE": "es",
        "WEATHER_DEFAULT_CITY": "Madrid",
        "WEATHER_TIMEZONE": "Europe/Madrid",
        "WEATHER_STATE_FILE": str(tmp_path / "state.json"),
        "WEATHER_TIMEOUT": "2.5",
    })

    assert not settings.demo
    assert settings.api_key == "abc123"
    assert settings.base_url == "https://proxy.test/owm"
    assert settings.units == "imperial"
    assert settings.default_city == "Madrid"
    assert str(settings.tz) == "Europe/Madrid"
    assert settings.state_file == Path(tmp_path / "state.json")
    assert settings.timeout == 2.5


@pytest.mark.parametrize("env", [
    {"WEATHER_UNITS": "kelvin"},
    {"WEATHER_TIMEZONE": "Mars/Olympus_Mons"},
    {"WEATHER_TIMEOUT": "soon"},
    {"WEATHER_TIMEOUT": "0"},
])
def test_invalid_settings(env):
    with pytest.raises(ValidationError):
        load_settings(env)
