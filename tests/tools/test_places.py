"""Unit tests for `tools.places` without real API calls."""

from __future__ import annotations

from typing import Any, Dict

import httpx
import pytest

from errors import ConfigurationError, UpstreamProviderError
from tools import places
from workflows.schemas import Coordinate

ORIGIN = Coordinate(lat=48.8566, lng=2.3522)


def _sample_place(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "place_id": "ChIJ-louvre",
        "name": "Louvre Museum",
        "geometry": {"location": {"lat": 48.8606, "lng": 2.3376}},
        "types": ["museum", "tourist_attraction", "point_of_interest", "establishment"],
        "rating": 4.7,
        "user_ratings_total": 250000,
        "vicinity": "Rue de Rivoli, Paris",
        "photos": [{"photo_reference": "ref-1", "height": 100, "width": 200}],
    }
    payload.update(overrides)
    return payload


def test_client_requires_api_key():
    with pytest.raises(ConfigurationError):
        places.GooglePlacesClient(None)
    with pytest.raises(ConfigurationError):
        places.GooglePlacesClient("")


def test_search_nearby_normalizes_results(monkeypatch, fake_response):
    captured: Dict[str, Any] = {}

    def _fake_request(method: str, url: str, **kw: Any):  # pragma: no cover - exercised via call
        captured.update(method=method, url=url, **kw)
        return fake_response({"status": "OK", "results": [_sample_place()]})

    monkeypatch.setattr(places, "_request", _fake_request)

    results = places.GooglePlacesClient("fake-key").search_nearby(ORIGIN, radius_m=1500)

    assert captured["method"] == "GET"
    assert captured["url"].endswith("/nearbysearch/json")
    assert captured["params"]["location"] == "48.8566,2.3522"
    assert captured["params"]["radius"] == "1500"
    assert captured["params"]["type"] == "tourist_attraction"
    assert captured["params"]["key"] == "fake-key"

    assert len(results) == 1
    place = results[0]
    assert place.place_id == "ChIJ-louvre"
    assert place.location == Coordinate(lat=48.8606, lng=2.3376)
    assert place.user_ratings_total == 250000
    assert place.photo_references == ["ref-1"]


def test_search_nearby_zero_results_is_empty(monkeypatch, fake_response):
    monkeypatch.setattr(places, "_request", lambda *a, **kw: fake_response({"status": "ZERO_RESULTS", "results": []}))

    assert places.GooglePlacesClient("fake-key").search_nearby(ORIGIN) == []


def test_search_nearby_provider_error_status(monkeypatch, fake_response):
    monkeypatch.setattr(
        places,
        "_request",
        lambda *a, **kw: fake_response({"status": "REQUEST_DENIED", "error_message": "bad key"}),
    )

    with pytest.raises(UpstreamProviderError) as excinfo:
        places.GooglePlacesClient("fake-key").search_nearby(ORIGIN)

    assert excinfo.value.status == "REQUEST_DENIED"
    assert "bad key" in str(excinfo.value)


def test_search_nearby_http_error(monkeypatch, fake_response):
    monkeypatch.setattr(places, "_request", lambda *a, **kw: fake_response({}, status_code=503))

    with pytest.raises(UpstreamProviderError) as excinfo:
        places.GooglePlacesClient("fake-key").search_nearby(ORIGIN)

    assert excinfo.value.status_code == 503


def test_search_nearby_non_json_body(monkeypatch, fake_response):
    monkeypatch.setattr(places, "_request", lambda *a, **kw: fake_response(ValueError("not json")))

    with pytest.raises(UpstreamProviderError):
        places.GooglePlacesClient("fake-key").search_nearby(ORIGIN)


def test_search_nearby_transport_error_propagates(monkeypatch):
    def _boom(*a: Any, **kw: Any):
        raise httpx.ConnectError("unreachable")

    monkeypatch.setattr(places, "_request", _boom)

    with pytest.raises(httpx.RequestError):
        places.GooglePlacesClient("fake-key").search_nearby(ORIGIN)


def test_malformed_places_are_skipped(monkeypatch, fake_response):
    bad = _sample_place(place_id="broken", geometry={})
    out_of_range = _sample_place(place_id="weird", rating=7.5)
    monkeypatch.setattr(
        places,
        "_request",
        lambda *a, **kw: fake_response({"status": "OK", "results": [bad, out_of_range, _sample_place()]}),
    )

    results = places.GooglePlacesClient("fake-key").search_nearby(ORIGIN)

    assert [p.place_id for p in results] == ["ChIJ-louvre"]


def test_photo_url_embeds_reference_and_key():
    url = places.GooglePlacesClient("fake-key").photo_url("ref-1")

    assert url.startswith("https://maps.googleapis.com/maps/api/place/photo?")
    assert "photoreference=ref-1" in url
    assert "maxwidth=400" in url
    assert "key=fake-key" in url


@pytest.mark.parametrize("payload", [["unexpected"], "OK", None, 42])
def test_search_nearby_non_object_body(monkeypatch, fake_response, payload):
    monkeypatch.setattr(places, "_request", lambda *a, **kw: fake_response(payload))

    with pytest.raises(UpstreamProviderError, match="expected an object"):
        places.GooglePlacesClient("fake-key").search_nearby(ORIGIN)


def test_non_object_place_entries_are_skipped(monkeypatch, fake_response):
    odd_geometry = _sample_place(place_id="odd", geometry=["not", "a", "dict"])
    odd_photos = _sample_place(place_id="photos", photos=["ref-as-string"])
    monkeypatch.setattr(
        places,
        "_request",
        lambda *a, **kw: fake_response(
            {"status": "OK", "results": [None, "junk", odd_geometry, odd_photos, _sample_place()]}
        ),
    )

    results = places.GooglePlacesClient("fake-key").search_nearby(ORIGIN)

    assert [p.place_id for p in results] == ["ChIJ-louvre"]
