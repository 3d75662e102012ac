# agents/suggestion_agent.py
"""GeoSuggestionService: nearby suggestions with graceful degradation.

Ordinary upstream trouble (missing key, HTTP errors, provider error codes,
nothing eligible nearby) never reaches the caller. The service substitutes a
static, hand-curated list and reports why through ``SuggestionResult``.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Literal, Optional

import httpx

from agents.suggestion_ranker import SuggestionRanker
from errors import ConfigurationError, UpstreamProviderError
from tools.places import GooglePlacesClient
from workflows.schemas import Coordinate, TravelSuggestion

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_M = 25000

NOT_CONFIGURED_ADVISORY = "Live place search is not configured; showing general ideas instead."
UNAVAILABLE_ADVISORY = "Live place search is unavailable right now; showing general ideas instead."
EMPTY_ADVISORY = "No nearby attractions found; showing general ideas instead."


def fallback_suggestions() -> List[TravelSuggestion]:
    """Static suggestions used whenever live search cannot produce results."""
    return [
        TravelSuggestion(
            id="fallback-1",
            name="Local Discovery Walk",
            distance="2.5km",
            travel_time="30min",
            type="Walking Tour",
            description="Explore the charming streets and hidden gems of your neighborhood.",
            highlights=["Local culture", "Hidden spots", "Photo opportunities"],
            best_for=["Explorers", "Photography"],
            rating=4.2,
            location="City Center",
            photos=[],
        ),
        TravelSuggestion(
            id="fallback-2",
            name="Historic Downtown",
            distance="5.1km",
            travel_time="45min",
            type="Historic District",
            description="Discover the rich history and architecture of the downtown area.",
            highlights=["Historic buildings", "Local restaurants", "Shopping"],
            best_for=["History buffs", "Architecture lovers"],
            rating=4.5,
            location="Downtown",
            photos=[],
        ),
        TravelSuggestion(
            id="fallback-3",
            name="City Park & Gardens",
            distance="3.8km",
            travel_time="20min",
            type="Park",
            description="Relax and enjoy nature in the beautiful city park with gardens.",
            highlights=["Peaceful atmosphere", "Beautiful gardens", "Walking trails"],
            best_for=["Nature lovers", "Relaxation"],
            rating=4.3,
            location="Park District",
            photos=[],
        ),
    ]


@dataclass(frozen=True)
class SuggestionResult:
    suggestions: List[TravelSuggestion]
    source: Literal["live", "fallback"]
    message: Optional[str] = None


class GeoSuggestionService:
    """Fetch nearby places, rank them, and fall back to static ideas on failure."""

    def __init__(
        self,
        places_client: Optional[GooglePlacesClient] = None,
        *,
        ranker: Optional[SuggestionRanker] = None,
    ) -> None:
        self.places_client = places_client
        if ranker is None:
            photo_url = places_client.photo_url if places_client is not None else None
            ranker = SuggestionRanker(photo_url=photo_url)
        self.ranker = ranker

    async def suggest(self, origin: Coordinate, radius_m: int = DEFAULT_RADIUS_M) -> SuggestionResult:
        try:
            if self.places_client is None:
                raise ConfigurationError("Google Places API key not configured")
            places = await asyncio.to_thread(self.places_client.search_nearby, origin, radius_m)
        except ConfigurationError as exc:
            logger.warning(f"Place search unavailable ({exc}); using fallback suggestions")
            return self._fallback(NOT_CONFIGURED_ADVISORY)
        except (UpstreamProviderError, httpx.HTTPError) as exc:
            logger.warning(f"Place search failed ({exc}); using fallback suggestions")
            return self._fallback(UNAVAILABLE_ADVISORY)

        suggestions = self.ranker.rank(places, origin)
        if not suggestions:
            logger.info(
                f"No eligible places among {len(places)} results near {origin.lat},{origin.lng}; "
                "using fallback suggestions"
            )
            return self._fallback(EMPTY_ADVISORY)

        return SuggestionResult(suggestions=suggestions, source="live")

    @staticmethod
    def _fallback(message: str) -> SuggestionResult:
        return SuggestionResult(suggestions=fallback_suggestions(), source="fallback", message=message)
