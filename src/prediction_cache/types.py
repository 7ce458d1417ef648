"""Type definitions for the prediction cache pipeline."""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Prediction:
    """
    A single address suggestion returned by the prediction service.

    Only the identifier and display text are interpreted by this system;
    every other provider field is carried untouched in `extra`.
    """

    place_id: str | None
    description: str
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Prediction":
        """Build a Prediction from the provider's JSON shape."""
        extra = {k: v for k, v in payload.items() if k not in ("place_id", "description")}
        return cls(
            place_id=payload.get("place_id") or None,
            description=payload.get("description", "") or "",
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the provider's JSON shape."""
        return {**self.extra, "place_id": self.place_id, "description": self.description}


# Ordered predictions for one query. [] is a valid result, None means "absent".
PredictionSet = list[Prediction]

CacheReadFn = Callable[[str], "PredictionSet | None | Awaitable[PredictionSet | None]"]
CacheWriteFn = Callable[[str, PredictionSet], "None | Awaitable[None]"]


@dataclass(frozen=True)
class CacheLayer:
    """
    A named, pluggable source/sink of previously fetched predictions.

    Both callables receive the normalized query key. Either may be sync or
    async, and either may be omitted; a layer with neither is inert.
    """

    name: str
    read: CacheReadFn | None = None
    write: CacheWriteFn | None = None


@dataclass(frozen=True)
class ResolutionOutcome(Generic[T]):
    """Resolved data plus its provenance."""

    data: T
    from_cache: bool = False
    layer_name: str | None = None


@dataclass(frozen=True)
class Provenance:
    """Which layer (if any) answered the most recent prediction query."""

    from_cache: bool | None = None
    layer_name: str | None = None


# Observer callbacks
CacheHitObserver = Callable[[str, str, PredictionSet], None]
ExternalResultObserver = Callable[[str, PredictionSet], None]
