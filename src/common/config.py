"""
Centralized configuration for the address lookup system.
All tunable constants and settings are defined here.
"""

import os

# Persistent store
# Namespace (LanceDB table) used by the built-in cache layer and detail resolver
DEFAULT_NAMESPACE: str = "maps_addresses"

# Provenance label reported when the built-in store answers a lookup
STORE_LAYER_NAME: str = "firebase"

# Database path for the LanceDB-backed store
DB_PATH: str = "data/address_lookup/places.db"

# Query suppression
# Queries whose normalized form is shorter than this are submitted as a reset
MIN_QUERY_LENGTH: int = 3

# Google Places
GOOGLE_MAPS_API_KEY: str | None = os.environ.get("GOOGLE_MAPS_API_KEY")

PLACES_AUTOCOMPLETE_URL: str = "https://maps.googleapis.com/maps/api/place/autocomplete/json"
PLACES_DETAILS_URL: str = "https://maps.googleapis.com/maps/api/place/details/json"

# Status string the Places API returns on success
PLACES_OK_STATUS: str = "OK"
PLACES_ZERO_RESULTS_STATUS: str = "ZERO_RESULTS"

# HTTP timeout for Places calls (seconds). Retries are left to the caller.
PLACES_HTTP_TIMEOUT_S: float = 10.0

# Fields requested from the Place Details endpoint (None = provider default)
PLACES_DETAIL_FIELDS: str | None = None
