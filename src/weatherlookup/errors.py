# error taxonomy shared by the sources, the service and the cli

from __future__ import annotations


class ValidationError(ValueError):
    # bad caller input (empty place, malformed feed, bad settings); never reaches the network
    pass


class WeatherAPIError(RuntimeError):
    # base for everything a weather source can fail with
    default_message = "Failed to fetch weather data. Please try again later."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(WeatherAPIError):
    default_message = "City not found"


class UnauthorizedError(WeatherAPIError):
    default_message = "API key invalid. Please check your OpenWeatherMap API key (OPENWEATHER_API_KEY)."


class TransientError(WeatherAPIError):
    # any other upstream, network or payload failure
    pass
