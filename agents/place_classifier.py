# agents/place_classifier.py
"""PlaceClassifier: derive display type, blurb and tags from a place's categories."""
from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from workflows.schemas import RawPlace

# Priority order matters: the first listed type a place carries wins.
TYPE_LABELS: Dict[str, str] = {
    "tourist_attraction": "Tourist Attraction",
    "museum": "Museum",
    "amusement_park": "Amusement Park",
    "zoo": "Zoo",
    "aquarium": "Aquarium",
    "art_gallery": "Art Gallery",
    "park": "Park",
    "natural_feature": "Natural Feature",
    "point_of_interest": "Point of Interest",
}
DEFAULT_TYPE_LABEL = "Attraction"

TRAVEL_TYPES = frozenset(TYPE_LABELS) | {"establishment"}

MAX_HIGHLIGHTS = 3
MAX_BEST_FOR = 2

# Only the first matching entry contributes.
_TYPE_HIGHLIGHTS: List[Tuple[str, Tuple[str, str]]] = [
    ("museum", ("Educational experience", "Cultural significance")),
    ("park", ("Outdoor activities", "Nature experience")),
    ("tourist_attraction", ("Must-see destination", "Local landmark")),
]

# Every matching entry contributes, in this order.
_AUDIENCES: List[Tuple[frozenset, Tuple[str, str]]] = [
    (frozenset({"museum", "art_gallery"}), ("Culture enthusiasts", "History buffs")),
    (frozenset({"park", "natural_feature"}), ("Nature lovers", "Outdoor activities")),
    (frozenset({"amusement_park", "zoo"}), ("Families", "Adventure seekers")),
    (frozenset({"tourist_attraction"}), ("First-time visitors", "Sightseeing")),
]
_DEFAULT_AUDIENCE = ("All travelers", "Local exploration")


class PlaceClassifier:
    """Stateless mapping from provider categories to presentation fields."""

    def is_eligible(self, place: RawPlace) -> bool:
        return not TRAVEL_TYPES.isdisjoint(place.types)

    def place_type(self, types: Iterable[str]) -> str:
        present = set(types)
        for key, label in TYPE_LABELS.items():
            if key in present:
                return label
        return DEFAULT_TYPE_LABEL

    def describe(self, place: RawPlace) -> str:
        kind = self.place_type(place.types).lower()
        stars = f" with {place.rating:g} stars" if place.rating else ""
        return (
            f"A popular {kind} in the area{stars}. {place.name} offers visitors an "
            "authentic local experience and is well-regarded by travelers."
        )

    def highlights(self, place: RawPlace) -> List[str]:
        out: List[str] = []
        if place.rating is not None and place.rating >= 4.5:
            out.append("Highly rated destination")
        if place.user_ratings_total is not None and place.user_ratings_total > 100:
            out.append("Popular with visitors")
        if place.photo_references:
            out.append("Photo-worthy location")
        for key, pair in _TYPE_HIGHLIGHTS:
            if key in place.types:
                out.extend(pair)
                break
        return out[:MAX_HIGHLIGHTS]

    def best_for(self, place: RawPlace) -> List[str]:
        present = set(place.types)
        out: List[str] = []
        for keys, pair in _AUDIENCES:
            if not keys.isdisjoint(present):
                out.extend(pair)
        if not out:
            out.extend(_DEFAULT_AUDIENCE)
        return out[:MAX_BEST_FOR]
