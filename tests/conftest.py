"""Pytest fixtures for offline tests: no network, no Redis, no real model."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import pytest

# Make sure nothing reaches real services when api.main builds its default app.
for _key in (
    "GOOGLE_PLACES_API_KEY",
    "GOOGLE_MAPS_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_API_KEY",
    "REDIS_URL",
    "AWS_SECRETS_MANAGER_SECRET_NAME",
):
    os.environ.pop(_key, None)

from errors import GenerationUpstreamError  # noqa: E402
from workflows.schemas import Coordinate, ItineraryCreate, RawPlace  # noqa: E402
from workflows.storage import ItineraryStorage  # noqa: E402


class FakeResponse:
    """Lightweight stand-in for httpx.Response used in patched requests."""

    def __init__(self, payload: Any, status_code: int = 200, headers: Dict[str, str] | None = None):
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}
        self.text = ""

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def fake_response():
    """Factory that returns FakeResponse objects."""

    def _factory(payload: Any, status_code: int = 200, headers: Dict[str, str] | None = None) -> FakeResponse:
        return FakeResponse(payload, status_code=status_code, headers=headers)

    return _factory


@pytest.fixture
def make_place():
    """Factory for RawPlace objects with sensible defaults."""

    def _factory(place_id: str = "place-1", **overrides: Any) -> RawPlace:
        payload: Dict[str, Any] = {
            "place_id": place_id,
            "name": f"Place {place_id}",
            "location": Coordinate(lat=48.8606, lng=2.3376),
            "types": ["tourist_attraction", "point_of_interest", "establishment"],
        }
        payload.update(overrides)
        return RawPlace(**payload)

    return _factory


def sample_itinerary_payload(days: int = 2) -> Dict[str, Any]:
    """A well-formed generation response in the camelCase wire shape."""
    return {
        "title": "Roman Holiday for Two",
        "description": "Ancient ruins, long dinners and golden-hour walks.",
        "duration": f"{days} Days",
        "days": [
            {
                "day": n,
                "date": f"2025-06-0{n}",
                "title": f"Day {n} in Rome",
                "activities": [
                    {
                        "time": "09:00 AM",
                        "period": "morning",
                        "activity": "Colosseum guided tour",
                        "location": "Piazza del Colosseo, 1",
                        "duration": "3 hours",
                        "cost": "€€",
                    },
                    {
                        "time": "07:30 PM",
                        "period": "evening",
                        "activity": "Dinner in Trastevere",
                        "location": "Via della Lungaretta",
                        "notes": "Book ahead on weekends",
                    },
                ],
            }
            for n in range(1, days + 1)
        ],
        "recommendations": {
            "bestPhotoSpots": ["Pincio Terrace"],
            "localTips": ["Carry a refillable bottle for the nasoni fountains"],
            "weatherAndPacking": ["Warm days, pack light layers"],
        },
    }


@pytest.fixture
def itinerary_payload() -> Dict[str, Any]:
    return sample_itinerary_payload()


class FakeGenerator:
    """Records prompts and replays scripted responses (dicts) or exceptions."""

    def __init__(self, *responses: Any) -> None:
        self.responses: List[Any] = list(responses)
        self.calls: List[Dict[str, str]] = []

    async def generate_structured_text(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        self.calls.append({"system": system_prompt, "user": user_prompt})
        if not self.responses:
            raise GenerationUpstreamError("no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_generator_factory():
    return FakeGenerator


@pytest.fixture
def storage() -> ItineraryStorage:
    return ItineraryStorage(None)


@pytest.fixture
def rome_preferences() -> Dict[str, Any]:
    return {
        "title": "Rome getaway",
        "location": "Rome",
        "start_date": "2025-06-01",
        "end_date": "2025-06-02",
        "trip_type": "couples",
        "transport": "walking",
        "accommodation": "boutique hotel",
        "dining": "local trattorias",
        "age_group": "25-34",
        "interests": "history, food, photography",
    }


@pytest.fixture
def draft_record(storage: ItineraryStorage, rome_preferences: Dict[str, Any]):
    return storage.create(ItineraryCreate(**rome_preferences))


@pytest.fixture
def fake_places_client_factory():
    """Build a stand-in for GooglePlacesClient with scripted results."""

    class _FakePlacesClient:
        def __init__(self, result: Any = None, photo_prefix: str = "https://photos.test/") -> None:
            self.result = result if result is not None else []
            self.photo_prefix = photo_prefix
            self.calls: List[Dict[str, Any]] = []

        def search_nearby(self, origin: Coordinate, radius_m: int = 25000) -> List[RawPlace]:
            self.calls.append({"origin": origin, "radius_m": radius_m})
            if isinstance(self.result, Exception):
                raise self.result
            return list(self.result)

        def photo_url(self, photo_reference: str) -> str:
            return f"{self.photo_prefix}{photo_reference}"

    def _factory(result: Optional[Any] = None, **kw: Any) -> _FakePlacesClient:
        return _FakePlacesClient(result, **kw)

    return _factory
