"""
Client for the venues/events data API.

Endpoints:
  GET /api/filter-options  -> {"data": {"dates": [...], ...}} or the bare object
  GET /api/venues          -> [...] or {"data": [...]}, one row per venue/event pair

/api/venues accepts optional venue_id, category, vibe, offer and date query
parameters, applied server-side.
"""

import logging
from typing import Any, Optional

import requests

from dubaievents import __version__

logger = logging.getLogger(__name__)

_HEADERS = {"User-Agent": f"dubaievents/{__version__}"}
_VENUE_PARAMS = ("venue_id", "category", "vibe", "offer", "date")


class DataAPIError(Exception):
    """Raised when the data API cannot be reached or returns an unusable response."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"{message} ({url})")


def _unwrap(payload: Any) -> Any:
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class DataAPIClient:
    def __init__(self, base_url: str, timeout: float = 15, api_key: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(_HEADERS)
        if api_key:
            self.session.headers["Authorization"] = f"Bearer {api_key}"

    def _get(self, path: str, params: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            logger.warning("Data API returned %s for %s", status, url)
            raise DataAPIError(url, f"HTTP {status}", status_code=status) from exc
        except requests.RequestException as exc:
            logger.warning("Data API request failed for %s: %s", url, exc)
            raise DataAPIError(url, f"Request failed: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise DataAPIError(url, "Response is not valid JSON", status_code=response.status_code) from exc

    def fetch_filter_options(self) -> dict:
        options = _unwrap(self._get("/api/filter-options"))
        if not isinstance(options, dict):
            raise DataAPIError(f"{self.base_url}/api/filter-options", "Expected a JSON object")
        if not isinstance(options.get("dates"), list):
            options["dates"] = []
        return options

    def fetch_venues(self, **params) -> list[dict]:
        unknown = set(params) - set(_VENUE_PARAMS)
        if unknown:
            raise TypeError(f"Unsupported venue filters: {', '.join(sorted(unknown))}")
        query = {k: v for k, v in params.items() if v is not None}

        rows = _unwrap(self._get("/api/venues", params=query or None))
        if not isinstance(rows, list):
            raise DataAPIError(f"{self.base_url}/api/venues", "Expected a JSON list")
        logger.debug("Fetched %d venue rows", len(rows))
        return rows
