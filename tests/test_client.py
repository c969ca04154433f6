# live client tests with a fake session patched in, so no request ever leaves the process

import json
from pathlib import Path

import pytest
import requests

from weatherlookup.client import WeatherAPIClient
from weatherlookup.errors import NotFoundError, TransientError, UnauthorizedError
from weatherlookup.service import WeatherService

DATA = Path(__file__).parent / "data"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        if self.error:
            raise self.error
        return self.response


def make_client(monkeypatch, session, **kwargs):
    client = WeatherAPIClient(api_key="secret", **kwargs)
    monkeypatch.setattr(client, "_session", lambda: session)
    return client


def test_current_request_is_built_from_settings(monkeypatch):
    payload = json.loads((DATA / "current_london.json").read_text())
    session = FakeSession(FakeResponse(payload=payload))
    client = make_client(monkeypatch, session, base_url="https://example.test/data/2.5/", units="imperial", language="fr")

    assert client.get_current("London, UK") == payload

    url, params, timeout = session.requests[0]
    assert url == "https://example.test/data/2.5/weather"
    assert params == {"q": "London, UK", "appid": "secret", "units": "imperial", "lang": "fr"}
    assert timeout == WeatherAPIClient.DEFAULT_TIMEOUT


def test_forecast_uses_forecast_endpoint(monkeypatch):
    payload = json.loads((DATA / "forecast_london.json").read_text())
    session = FakeSession(FakeResponse(payload=payload))
    client = make_client(monkeypatch, session)

    assert client.get_forecast("London") == payload
    assert session.requests[0][0].endswith("/forecast")


def test_current_not_found(monkeypatch):
    session = FakeSession(FakeResponse(404, {"cod": "404", "message": "city not found"}))
    with pytest.raises(NotFoundError):
        make_client(monkeypatch, session).get_current("Nowhere")


def test_forecast_not_found_is_none(monkeypatch):
    session = FakeSession(FakeResponse(404, {"cod": "404", "message": "city not found"}))
    assert make_client(monkeypatch, session).get_forecast("Nowhere") is None


@pytest.mark.parametrize("method", ["get_current", "get_forecast"])
def test_rejected_key_is_unauthorized(monkeypatch, method):
    session = FakeSession(FakeResponse(401, {"cod": 401, "message": "Invalid API key"}))
    with pytest.raises(UnauthorizedError) as exc_info:
        getattr(make_client(monkeypatch, session), method)("London")
    assert "API key" in str(exc_info.value)


@pytest.mark.parametrize("method", ["get_current", "get_forecast"])
def test_server_error_is_transient(monkeypatch, method):
    session = FakeSession(FakeResponse(503, text="Service Unavailable"))
    with pytest.raises(TransientError) as exc_info:
        getattr(make_client(monkeypatch, session), method)("London")
    assert "HTTP 503" in str(exc_info.value)


def test_network_error_is_transient(monkeypatch):
    session = FakeSession(error=requests.ConnectionError("connection refused"))
    with pytest.raises(TransientError):
        make_client(monkeypatch, session).get_current("London")


def test_invalid_json_is_transient(monkeypatch):
    session = FakeSession(FakeResponse(200, None, text="<html>oops</html>"))
    with pytest.raises(TransientError):
        make_client(monkeypatch, session).get_forecast("London")


def test_unexpected_shape_is_transient(monkeypatch):
    session = FakeSession(FakeResponse(200, {"cod": 200}))
    with pytest.raises(TransientError):
        make_client(monkeypatch, session).get_current("London")


def test_missing_key_is_unauthorized():
    with pytest.raises(UnauthorizedError):
        WeatherAPIClient(api_key="")


def test_session_is_reused_per_thread():
    client = WeatherAPIClient(api_key="secret")
    first = client._session()

    assert client._session() is first
    assert first.headers["User-Agent"] == client.user_agent


class RecordingSession(FakeSession):
    # answers by endpoint and remembers whether it was closed
    def __init__(self):
        super().__init__()
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        name = "forecast_london.json" if url.endswith("/forecast") else "current_london.json"
        return FakeResponse(payload=json.loads((DATA / name).read_text()))

    def close(self):
        self.closed = True


def test_sessions_are_reused_across_queries_and_closed(monkeypatch):
    client = WeatherAPIClient(api_key="secret")
    built = []

    def build():
        sess = RecordingSession()
        built.append(sess)
        return sess

    monkeypatch.setattr(client, "_build_session", build)

    with WeatherService(client) as service:
        for _ in range(5):
            current, feed = service.fetch_weather("London")
            assert current.place == "London"
            assert len(feed) == 6

    # one session per fetch worker, however many queries ran
    assert 1 <= len(built) <= 2
    assert sum(len(s.requests) for s in built) == 10
    assert all(s.closed for s in built)


def test_close_releases_real_sessions():
    client = WeatherAPIClient(api_key="secret")
    first = client._session()
    client.close()

    assert client._session() is not first
    client.close()
