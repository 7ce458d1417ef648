"""Contracts for the external prediction and detail services."""

from typing import Any, Protocol

from prediction_cache.types import Prediction


class PredictionService(Protocol):
    """Authoritative source of address predictions."""

    async def get_predictions(self, raw_input: str, **options: Any) -> list[Prediction]:
        """
        Fetch predictions for the raw (non-normalized) input.

        An empty input is a reset request: the service drops any per-session
        state and returns [] without contacting the provider.
        """
        ...


class DetailService(Protocol):
    """Authoritative source of full place records."""

    async def get_details(self, place_id: str) -> tuple[str, dict | None]:
        """Return (status, detail). Any status other than "OK" means no detail."""
        ...
