"""Pydantic schemas for places, suggestions, preferences and itineraries."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

ItineraryStatus = Literal["draft", "generated", "saved"]
ActivityPeriod = Literal["morning", "afternoon", "evening"]


class _CamelModel(BaseModel):
    """Models exchanged over the wire use camelCase keys but accept snake_case too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Place Search Schemas
# ============================================================================

class Coordinate(BaseModel):
    """Geographic coordinate in degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90, allow_inf_nan=False)
    lng: float = Field(ge=-180, le=180, allow_inf_nan=False)


class RawPlace(BaseModel):
    """A place as reported by the place-search provider."""

    model_config = ConfigDict(frozen=True)

    place_id: str
    name: str
    location: Coordinate
    types: List[str] = Field(default_factory=list)
    rating: Optional[float] = Field(None, ge=0, le=5)
    user_ratings_total: Optional[int] = Field(None, ge=0)
    vicinity: Optional[str] = None
    photo_references: List[str] = Field(default_factory=list)


class TravelSuggestion(_CamelModel):
    """A classified, human-presentable nearby place."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    distance: str
    travel_time: str
    type: str
    description: str
    highlights: List[str] = Field(default_factory=list, max_length=3)
    best_for: List[str] = Field(default_factory=list, max_length=2)
    rating: float = 4.0
    location: str
    photos: List[str] = Field(default_factory=list)


# ============================================================================
# Generated Itinerary Schema
# ============================================================================

class Activity(_CamelModel):
    time: str
    period: ActivityPeriod
    activity: str
    location: str
    duration: Optional[str] = None
    cost: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("period", mode="before")
    @classmethod
    def normalize_period(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("duration", "cost", "notes", mode="before")
    @classmethod
    def stringify_optional(cls, v: Any) -> Optional[str]:
        """Models sometimes emit numbers for free-text fields (e.g. cost: 20)."""
        if v is None:
            return None
        return v if isinstance(v, str) else str(v)


class DayPlan(_CamelModel):
    day: int = Field(ge=1, description="1-based day number")
    date: str
    title: str
    activities: List[Activity] = Field(default_factory=list)


class Recommendations(_CamelModel):
    best_photo_spots: List[str] = Field(default_factory=list)
    local_tips: List[str] = Field(default_factory=list)
    weather_and_packing: List[str] = Field(default_factory=list)


class GeneratedItinerary(_CamelModel):
    """Day-by-day itinerary produced by the generative model."""

    title: str
    description: str
    duration: str
    days: List[DayPlan] = Field(min_length=1)
    recommendations: Recommendations = Field(default_factory=Recommendations)

    @model_validator(mode="after")
    def check_day_sequence(self) -> "GeneratedItinerary":
        numbers = [day.day for day in self.days]
        expected = list(range(1, len(numbers) + 1))
        if numbers != expected:
            raise ValueError(f"days must be numbered {expected}, got {numbers}")
        return self


# ============================================================================
# Itinerary Record Schemas
# ============================================================================

class ItineraryPreferences(_CamelModel):
    """Trip preferences a generation request is built from."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    location: str = Field(min_length=1)
    start_date: str
    end_date: str
    trip_type: str = Field(description="solo, couples, family, friends")
    transport: str
    accommodation: str
    dining: str
    age_group: str
    interests: str


class ItineraryCreate(ItineraryPreferences):
    """Body accepted when creating a draft itinerary."""

    title: str = Field(min_length=1)
    description: Optional[str] = None


class ItineraryUpdate(_CamelModel):
    """Pass-through edits; ``status`` can only be moved to ``saved`` from outside."""

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[Literal["saved"]] = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ItineraryRecord(ItineraryCreate):
    """Snapshot of a stored itinerary."""

    id: int
    generated_content: Optional[GeneratedItinerary] = None
    status: ItineraryStatus = "draft"
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def preferences(self) -> ItineraryPreferences:
        return ItineraryPreferences.model_validate(
            self.model_dump(include=set(ItineraryPreferences.model_fields))
        )
