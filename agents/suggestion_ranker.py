# agents/suggestion_ranker.py
"""SuggestionRanker: turn raw nearby places into bounded TravelSuggestion lists."""
from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from agents.place_classifier import PlaceClassifier
from tools.geo import estimate_travel_minutes, format_distance, format_duration, haversine_km
from workflows.schemas import Coordinate, RawPlace, TravelSuggestion

MAX_SUGGESTIONS = 6
MAX_PHOTOS = 3
# Used when the requester's position is unknown.
FALLBACK_DISTANCE_KM = 5.0
DEFAULT_RATING = 4.0
DEFAULT_LOCATION = "Location not specified"


class SuggestionRanker:
    """Filter, classify and truncate places.

    Upstream order is preserved: the provider already ranks by prominence and
    nothing here re-sorts by distance or rating.
    """

    def __init__(
        self,
        *,
        classifier: Optional[PlaceClassifier] = None,
        photo_url: Optional[Callable[[str], str]] = None,
        limit: int = MAX_SUGGESTIONS,
    ) -> None:
        self.classifier = classifier or PlaceClassifier()
        self.photo_url = photo_url
        self.limit = max(0, min(limit, MAX_SUGGESTIONS))

    def rank(self, places: Sequence[RawPlace], origin: Optional[Coordinate] = None) -> List[TravelSuggestion]:
        eligible = [place for place in places if self.classifier.is_eligible(place)]
        return [self._to_suggestion(place, origin) for place in eligible[: self.limit]]

    def _to_suggestion(self, place: RawPlace, origin: Optional[Coordinate]) -> TravelSuggestion:
        distance_km = haversine_km(origin, place.location) if origin is not None else FALLBACK_DISTANCE_KM
        minutes = estimate_travel_minutes(distance_km)

        photos: List[str] = []
        if self.photo_url is not None:
            photos = [self.photo_url(ref) for ref in place.photo_references[:MAX_PHOTOS]]

        return TravelSuggestion(
            id=place.place_id,
            name=place.name,
            distance=format_distance(distance_km),
            travel_time=format_duration(minutes),
            type=self.classifier.place_type(place.types),
            description=self.classifier.describe(place),
            highlights=self.classifier.highlights(place),
            best_for=self.classifier.best_for(place),
            rating=place.rating if place.rating is not None else DEFAULT_RATING,
            location=place.vicinity or DEFAULT_LOCATION,
            photos=photos,
        )
