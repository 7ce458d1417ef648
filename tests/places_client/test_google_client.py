"""Tests for the Google Places client, using httpx.MockTransport."""

import httpx
from conftest import MAIN_ST_DETAIL, run

from places_client.core import GooglePlacesClient, _format_param

AUTOCOMPLETE_OK = {
    "status": "OK",
    "predictions": [
        {
            "description": "Paris, France",
            "place_id": "ChIJD7fiBh9u5kcRYJSMaMOCCwQ",
            "types": ["locality", "political"],
            "structured_formatting": {"main_text": "Paris", "secondary_text": "France"},
        }
    ],
}


def make_client(handler) -> tuple[GooglePlacesClient, list[httpx.Request]]:
    """Client whose HTTP calls are answered by `handler` and recorded."""
    requests: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
    return GooglePlacesClient(api_key="test-key", client=http), requests


class TestFormatParam:
    def test_list_joined_with_pipes(self):
        assert _format_param(["address", "geocode"]) == "address|geocode"

    def test_location_dict(self):
        assert _format_param({"lat": 48.85, "lng": 2.35}) == "48.85,2.35"

    def test_scalar(self):
        assert _format_param(5000) == "5000"


class TestGetPredictions:
    """Tests for GooglePlacesClient.get_predictions."""

    def test_parses_predictions(self):
        client, requests = make_client(lambda r: httpx.Response(200, json=AUTOCOMPLETE_OK))

        predictions = run(client.get_predictions("Paris"))

        assert len(predictions) == 1
        assert predictions[0].place_id == "ChIJD7fiBh9u5kcRYJSMaMOCCwQ"
        assert predictions[0].description == "Paris, France"
        assert predictions[0].extra["structured_formatting"]["main_text"] == "Paris"

    def test_sends_input_key_session_and_options(self):
        client, requests = make_client(lambda r: httpx.Response(200, json=AUTOCOMPLETE_OK))

        run(client.get_predictions("Paris", components="country:fr", types=["(cities)"]))

        params = requests[0].url.params
        assert params["input"] == "Paris"
        assert params["key"] == "test-key"
        assert params["sessiontoken"] == client.session_token
        assert params["components"] == "country:fr"
        assert params["types"] == "(cities)"

    def test_empty_input_rotates_session_without_request(self):
        client, requests = make_client(lambda r: httpx.Response(200, json=AUTOCOMPLETE_OK))
        token = client.session_token

        assert run(client.get_predictions("  ")) == []
        assert requests == []
        assert client.session_token != token

    def test_zero_results(self):
        client, _ = make_client(lambda r: httpx.Response(200, json={"status": "ZERO_RESULTS", "predictions": []}))
        assert run(client.get_predictions("zzzz")) == []

    def test_error_status(self):
        client, _ = make_client(
            lambda r: httpx.Response(200, json={"status": "REQUEST_DENIED", "error_message": "bad key"})
        )
        assert run(client.get_predictions("Paris")) == []

    def test_http_error(self):
        client, _ = make_client(lambda r: httpx.Response(503))
        assert run(client.get_predictions("Paris")) == []


class TestGetDetails:
    """Tests for GooglePlacesClient.get_details."""

    def test_ok(self):
        client, requests = make_client(lambda r: httpx.Response(200, json={"status": "OK", "result": MAIN_ST_DETAIL}))
        token = client.session_token

        status, detail = run(client.get_details("place-main-1"))

        assert status == "OK"
        assert detail == MAIN_ST_DETAIL
        assert requests[0].url.params["place_id"] == "place-main-1"
        assert requests[0].url.params["sessiontoken"] == token
        assert client.session_token != token

    def test_not_found(self):
        client, _ = make_client(lambda r: httpx.Response(200, json={"status": "NOT_FOUND"}))
        assert run(client.get_details("missing")) == ("NOT_FOUND", None)

    def test_http_error(self):
        client, _ = make_client(lambda r: httpx.Response(500))
        assert run(client.get_details("x")) == ("HTTP_ERROR", None)
