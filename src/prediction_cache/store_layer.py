"""
Built-in persistent-store cache layer.

Stores one record per prediction, keyed by the prediction's place_id and
tagged with the normalized query that produced it. Reading a query returns
every stored prediction tagged with that query.
"""

import asyncio
import uuid

from common.config import DEFAULT_NAMESPACE, STORE_LAYER_NAME
from common.logging_config import get_logger
from common.normalization import normalize
from place_store.base import PlaceStore, utc_timestamp
from prediction_cache.types import CacheLayer, Prediction, PredictionSet

logger = get_logger("prediction_cache_store_layer")


def record_key(prediction: Prediction, normalized_input: str) -> str:
    """
    Key a prediction record by its place_id.

    Predictions without an id get a synthetic key from the query plus a
    random suffix; collisions are possible but harmless.
    """
    if prediction.place_id:
        return prediction.place_id
    return f"{normalized_input}-{uuid.uuid4().hex[:10]}"


def create_store_layer(store: PlaceStore, namespace: str = DEFAULT_NAMESPACE) -> CacheLayer:
    """
    Build the built-in cache layer on top of a PlaceStore.

    Args:
        store: Persistent store client
        namespace: Collection/table holding the records

    Returns:
        CacheLayer named STORE_LAYER_NAME
    """

    async def read(query: str) -> PredictionSet | None:
        normalized_input = normalize(query)
        records = await store.query_by_field(namespace, "normalized_input", normalized_input)
        if not records:
            return None

        predictions = [Prediction.from_dict(r["prediction"]) for r in records if r.get("prediction")]
        if not predictions:
            return None

        logger.debug(f"Store layer found {len(predictions)} predictions for '{normalized_input}'")
        return predictions

    async def write(query: str, predictions: PredictionSet) -> None:
        if not predictions:
            return

        normalized_input = normalize(query)
        updated_at = utc_timestamp()
        writes = [
            store.merge_upsert(
                namespace,
                record_key(prediction, normalized_input),
                {
                    "normalized_input": normalized_input,
                    "prediction": prediction.to_dict(),
                    "updated_at": updated_at,
                },
            )
            for prediction in predictions
        ]
        await asyncio.gather(*writes)
        logger.debug(f"Store layer wrote {len(predictions)} predictions for '{normalized_input}'")

    return CacheLayer(name=STORE_LAYER_NAME, read=read, write=write)
