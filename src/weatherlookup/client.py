# OOP boundary for external i/o
# all http/keys/status mapping live here, the service only sees payload dicts or tagged errors
# a thread-local session is kept per ThreadPoolExecutor worker

from __future__ import annotations
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import requests
from requests.adapters import HTTPAdapter

from .config import DEFAULT_BASE_URL
from .errors import NotFoundError, TransientError, UnauthorizedError

logger = logging.getLogger(__name__)


class WeatherSource(ABC):
    # both sources return OpenWeatherMap 2.5 shaped payloads and fail with the same error tags

    @abstractmethod
    def get_current(self, query: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    def get_forecast(self, query: str) -> Optional[Dict[str, Any]]:
        ...

    def close(self) -> None:
        # sources holding connections release them here
        pass


class WeatherAPIClient(WeatherSource):
    # encapsulates provider details like base URL, params, auth and status mapping
    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        units: str = "metric",
        language: str = "en",
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = "weather-lookup/0.1",
    ):
        if not api_key:
            raise UnauthorizedError("OPENWEATHER_API_KEY not set")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.language = language
        self.timeout = timeout
        self.user_agent = user_agent

        # each worker thread lazily obtains its own session through _session()
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    def _build_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update({"User-Agent": self.user_agent})
        # no retries, a failed request surfaces straight away
        adapter = HTTPAdapter(max_retries=0)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    def _session(self) -> requests.Session:
        sess = getattr(self._local, "session", None)
        if sess is None:
            sess = self._build_session()
            self._local.session = sess
            with self._sessions_lock:
                self._sessions.append(sess)
        return sess

    def close(self) -> None:
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
            self._local = threading.local()
        for sess in sessions:
            sess.close()
        logger.debug("Closed %d http sessions", len(sessions))

    def _get(self, endpoint: str, query: str, required_key: str) -> Dict[str, Any]:
        url = f"{self.base_url}/{endpoint}"
        params = {
            "q": query,
            "appid": self.api_key,
            "units": self.units,
            "lang": self.language,
        }
        logger.debug("GET %s q=%r", url, query)

        try:
            resp = self._session().get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransientError(f"Request error for {query!r}: {exc}") from exc

        if resp.status_code == 404:
            raise NotFoundError(f"City not found: {query!r}")
        if resp.status_code == 401:
            raise UnauthorizedError()
        if resp.status_code >= 400:
            # short response snippet speeds up triage
            snippet = (resp.text or "")[:300]
            raise TransientError(f"HTTP {resp.status_code} from {endpoint} for {query!r}. Body: {snippet}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise TransientError(f"Invalid JSON from {endpoint} for {query!r}: {exc}") from exc

        if not isinstance(data, dict) or required_key not in data:
            raise TransientError(f"Unexpected API shape from {endpoint}: missing {required_key!r}")
        return data

    def get_current(self, query: str) -> Dict[str, Any]:
        return self._get("weather", query, required_key="main")

    def get_forecast(self, query: str) -> Optional[Dict[str, Any]]:
        try:
            return self._get("forecast", query, required_key="list")
        except NotFoundError:
            # forecast alone degrades to "no forecast" instead of failing the query
            logger.warning("No forecast found for %r", query)
            return None
