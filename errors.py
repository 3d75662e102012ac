"""Exception taxonomy shared by the suggestion and itinerary services."""

from __future__ import annotations

from typing import Optional


class TravelServiceError(Exception):
    """Base class for all service-level failures."""


class ConfigurationError(TravelServiceError):
    """A required credential or setting is missing."""


class UpstreamProviderError(TravelServiceError):
    """An external provider answered with a non-success status or error code."""

    def __init__(self, message: str, *, status: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status
        self.status_code = status_code


class GenerationError(TravelServiceError):
    """Itinerary generation failed; the stored record was left untouched."""


class GenerationUpstreamError(GenerationError):
    """The generative model call itself failed (network, quota, non-2xx)."""


class MalformedResponseError(GenerationError):
    """The generative model answered with invalid JSON or the wrong shape."""


class ItineraryNotFoundError(TravelServiceError):
    def __init__(self, itinerary_id: int) -> None:
        super().__init__(f"Itinerary {itinerary_id} not found")
        self.itinerary_id = itinerary_id
