"""
Place Detail Resolver

Resolves a selected prediction into its full place record, cache first:
1. Read the record stored under the place_id in the persistent store
2. Fall back to the external detail service
3. Write the fetched detail back to the store, with derived fields

Failures at any step collapse into an absent result; nothing is raised.
"""

from typing import Any

from common.config import DEFAULT_NAMESPACE, PLACES_OK_STATUS, STORE_LAYER_NAME
from common.logging_config import get_logger
from common.metrics import cache_hits, cache_misses, places_external_calls
from place_store.base import PlaceStore, utc_timestamp
from places_client.base import DetailService
from prediction_cache.types import Provenance, ResolutionOutcome

logger = get_logger("place_details")

ABSENT: ResolutionOutcome[dict | None] = ResolutionOutcome(data=None, from_cache=False, layer_name=None)


def extract_location(place: dict[str, Any]) -> dict[str, float] | None:
    """Flatten geometry.location into a {lat, lng} pair, if present."""
    location = (place.get("geometry") or {}).get("location")
    if not isinstance(location, dict):
        return None

    lat = location.get("lat")
    lng = location.get("lng")
    if lat is None or lng is None:
        return None
    return {"lat": float(lat), "lng": float(lng)}


def build_detail_record(place: dict[str, Any]) -> dict[str, Any]:
    """Record persisted for a resolved place: raw payload plus convenience fields."""
    return {
        "raw_place": place,
        "formatted_address": place.get("formatted_address"),
        "location": extract_location(place),
        "updated_at": utc_timestamp(),
    }


class DetailResolver:
    """Cache-first resolution of a place_id into a full place record."""

    def __init__(
        self,
        store: PlaceStore | None = None,
        detail_service: DetailService | None = None,
        namespace: str = DEFAULT_NAMESPACE,
    ):
        self.store = store
        self.detail_service = detail_service
        self.namespace = namespace

    async def _read_stored(self, place_id: str) -> dict | None:
        if self.store is None:
            return None
        try:
            record = await self.store.get(self.namespace, place_id)
        except Exception as e:
            logger.warning(f"Store read failed for '{place_id}': {e}")
            return None
        if record and record.get("raw_place"):
            return record["raw_place"]
        return None

    async def _fetch(self, place_id: str) -> dict | None:
        places_external_calls.add(1, attributes={"endpoint": "details"})
        try:
            status, place = await self.detail_service.get_details(place_id)
        except Exception as e:
            logger.error(f"Detail service failed for '{place_id}': {e}")
            return None

        if status != PLACES_OK_STATUS or not place:
            logger.info(f"No detail for '{place_id}' (status={status})")
            return None
        return place

    async def _write_back(self, place_id: str, place: dict) -> None:
        if self.store is None:
            return
        try:
            await self.store.merge_upsert(self.namespace, place_id, build_detail_record(place))
        except Exception as e:
            logger.warning(f"Store write failed for '{place_id}': {e}")

    async def resolve(
        self, place_id: str | None, provenance: Provenance | None = None
    ) -> ResolutionOutcome[dict | None]:
        """
        Resolve a place_id into a place record.

        Args:
            place_id: Identifier from the selected prediction
            provenance: Provenance of the prediction query the selection came from

        Returns:
            ResolutionOutcome. For externally fetched details, layer_name repeats
            the prediction query's layer when that query was a cache hit.
        """
        if not place_id:
            return ABSENT

        stored = await self._read_stored(place_id)
        if stored is not None:
            cache_hits.add(1, attributes={"layer": STORE_LAYER_NAME})
            logger.info(f"Detail for '{place_id}' served from store")
            return ResolutionOutcome(data=stored, from_cache=True, layer_name=STORE_LAYER_NAME)

        if self.detail_service is None:
            return ABSENT

        cache_misses.add(1)
        place = await self._fetch(place_id)
        if place is None:
            return ABSENT

        await self._write_back(place_id, place)

        layer_name = None
        if provenance is not None and provenance.from_cache:
            layer_name = provenance.layer_name
        return ResolutionOutcome(data=place, from_cache=False, layer_name=layer_name)
