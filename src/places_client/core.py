"""
Google Places client.

Implements both PredictionService (Place Autocomplete) and DetailService
(Place Details) over the Places web service using httpx.

Autocomplete keystrokes and the final details call share a session token,
which Google bills as a single session. The token is rotated when the input
is cleared and after every details call.
"""

import uuid
from typing import Any

import httpx

from common.config import (
    GOOGLE_MAPS_API_KEY,
    PLACES_AUTOCOMPLETE_URL,
    PLACES_DETAIL_FIELDS,
    PLACES_DETAILS_URL,
    PLACES_HTTP_TIMEOUT_S,
    PLACES_OK_STATUS,
    PLACES_ZERO_RESULTS_STATUS,
)
from common.logging_config import get_logger
from common.normalization import normalize
from prediction_cache.types import Prediction

logger = get_logger("places_client")

HTTP_ERROR_STATUS = "HTTP_ERROR"


def _format_param(value: Any) -> str:
    """Render an option value the way the Places API expects it."""
    if isinstance(value, (list, tuple)):
        return "|".join(str(v) for v in value)
    if isinstance(value, dict) and "lat" in value and "lng" in value:
        return f"{value['lat']},{value['lng']}"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class GooglePlacesClient:
    """Async client for Google Place Autocomplete and Place Details."""

    def __init__(
        self,
        api_key: str | None = GOOGLE_MAPS_API_KEY,
        client: httpx.AsyncClient | None = None,
        timeout: float = PLACES_HTTP_TIMEOUT_S,
        language: str | None = None,
    ):
        if not api_key:
            logger.warning("No Google Maps API key configured; Places requests will be rejected")
        self._api_key = api_key
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._language = language
        self.session_token = str(uuid.uuid4())

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GooglePlacesClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def reset_session(self) -> None:
        """Start a new autocomplete billing session."""
        self.session_token = str(uuid.uuid4())
        logger.debug("Started new Places session")

    def _base_params(self) -> dict[str, str]:
        params = {"key": self._api_key or "", "sessiontoken": self.session_token}
        if self._language:
            params["language"] = self._language
        return params

    async def _get_json(self, url: str, params: dict[str, str]) -> dict:
        response = await self._http().get(url, params=params)
        response.raise_for_status()
        return response.json()

    async def get_predictions(self, raw_input: str, **options: Any) -> list[Prediction]:
        """
        Fetch autocomplete predictions for raw user input.

        Empty input only resets the session. Extra keyword options (components,
        types, location, radius, ...) are sent as query parameters.

        Returns:
            Predictions in provider order; [] on ZERO_RESULTS or any failure
        """
        if not normalize(raw_input):
            self.reset_session()
            return []

        params = self._base_params()
        params["input"] = raw_input
        params.update({k: _format_param(v) for k, v in options.items() if v is not None})

        try:
            payload = await self._get_json(PLACES_AUTOCOMPLETE_URL, params)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Autocomplete request failed for '{raw_input}': {e}")
            return []

        status = payload.get("status")
        if status == PLACES_ZERO_RESULTS_STATUS:
            return []
        if status != PLACES_OK_STATUS:
            logger.warning(f"Autocomplete returned {status}: {payload.get('error_message', '')}")
            return []

        predictions = [Prediction.from_dict(p) for p in payload.get("predictions", [])]
        logger.debug(f"Autocomplete returned {len(predictions)} predictions for '{raw_input}'")
        return predictions

    async def get_details(self, place_id: str) -> tuple[str, dict | None]:
        """
        Fetch the full place record for a place_id.

        Returns:
            (status, result). status is "OK" on success, the provider's status
            string otherwise, or "HTTP_ERROR" when the request itself failed.
        """
        params = self._base_params()
        params["place_id"] = place_id
        if PLACES_DETAIL_FIELDS:
            params["fields"] = PLACES_DETAIL_FIELDS

        try:
            payload = await self._get_json(PLACES_DETAILS_URL, params)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Details request failed for '{place_id}': {e}")
            return HTTP_ERROR_STATUS, None
        finally:
            # A details call closes the autocomplete session
            self.reset_session()

        status = payload.get("status", "UNKNOWN_ERROR")
        if status != PLACES_OK_STATUS:
            logger.warning(f"Details returned {status} for '{place_id}'")
            return status, None

        return status, payload.get("result")
