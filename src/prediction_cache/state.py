"""Observable session state shared by the prediction pipeline and the UI facade."""

from dataclasses import dataclass, field

from prediction_cache.types import Prediction, Provenance


@dataclass
class SessionState:
    """
    Everything the UI layer observes for one lookup session.

    The prediction pipeline owns the prediction fields and provenance; the
    facade owns the selection fields.
    """

    input_value: str = ""
    last_query: str = ""
    predictions: list[Prediction] = field(default_factory=list)
    predictions_loading: bool = False
    selecting: bool = False
    last_result_from_cache: bool | None = None
    last_layer_name: str | None = None
    pending_external_query: str | None = None
    selected_place: dict | None = None

    @property
    def loading(self) -> bool:
        """True while predictions are being fetched or a selection is resolving."""
        return self.predictions_loading or self.selecting

    @property
    def provenance(self) -> Provenance:
        return Provenance(from_cache=self.last_result_from_cache, layer_name=self.last_layer_name)

    def set_provenance(self, from_cache: bool | None, layer_name: str | None) -> None:
        self.last_result_from_cache = from_cache
        self.last_layer_name = layer_name

    def reset_predictions(self) -> None:
        """Clear predictions and provenance (empty query)."""
        self.predictions = []
        self.predictions_loading = False
        self.pending_external_query = None
        self.set_provenance(None, None)
