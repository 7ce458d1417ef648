"""
Formatting utilities for the lookup front end.

Provides display formatting for predictions, provenance and resolved
places. All functions are UI-agnostic and return plain strings.
"""

from prediction_cache.types import Prediction, Provenance, ResolutionOutcome


def format_provenance(provenance: Provenance | ResolutionOutcome) -> str:
    """
    Describe where a result came from.

    Example output:
        cache (firebase)
        Google Places
    """
    if provenance.from_cache is None:
        return "no query"
    if provenance.from_cache:
        return f"cache ({provenance.layer_name})"
    return "Google Places"


def format_predictions(predictions: list[Prediction]) -> str:
    """
    Format predictions as a numbered list.

    Returns:
        One line per prediction, or a placeholder when there are none.
    """
    if not predictions:
        return "No suggestions."

    return "\n".join(f"{i}. {p.description}" for i, p in enumerate(predictions, 1))


def format_place(outcome: ResolutionOutcome) -> str:
    """Format a resolved place for display."""
    place = outcome.data
    if not place:
        return "Could not resolve the selected address."

    lines = [place.get("formatted_address") or place.get("name") or "Unknown address"]

    location = (place.get("geometry") or {}).get("location") or {}
    if "lat" in location and "lng" in location:
        lines.append(f"📍 {location['lat']:.6f}, {location['lng']:.6f}")

    lines.append(f"Source: {format_provenance(outcome)}")
    return "\n".join(lines)
