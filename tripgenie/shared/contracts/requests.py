"""
Request contracts for the AI endpoints.

Field names are snake_case in Python and camelCase on the wire, matching
what the web client sends (`userPreferences`, `previouslyShown`, ...).
Exclusion lists are sets: order is irrelevant and they are only used for
membership tests.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


DEFAULT_TRIP_DAYS = 3


class WireModel(BaseModel):
    """Base model accepting both camelCase and snake_case keys; strings are stripped."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True
    )


class Pace(str, Enum):
    """How densely a day should be scheduled."""

    RELAXED = "relaxed"
    MODERATE = "moderate"
    PACKED = "packed"


class GeoTag(WireModel):
    latitude: float
    longitude: float


class Weather(WireModel):
    temperature: float = Field(description="Temperature in degrees Celsius")
    condition: str = Field(description="Weather condition, e.g. 'Sunny'")


class Location(WireModel):
    """Destination city with optional coordinates and weather."""

    city: str = Field(min_length=1, description="Destination city")
    geotag: Optional[GeoTag] = Field(default=None)
    weather: Optional[Weather] = Field(default=None)
    address: Optional[str] = Field(default=None, description="Resolved address")


class UserPreferences(WireModel):
    """Traveler preferences used to steer suggestions."""

    interests: Set[str] = Field(default_factory=set)
    budget: Optional[int] = Field(default=None, ge=0)
    pace: Optional[Pace] = Field(default=None)
    food_preference: Set[str] = Field(default_factory=set)
    travel_style: Set[str] = Field(default_factory=set)


class TripRequest(WireModel):
    """Request for a full day-by-day trip plan."""

    user_preferences: UserPreferences = Field(default_factory=UserPreferences)
    location: Location
    duration: int = Field(default=DEFAULT_TRIP_DAYS, ge=1, description="Trip length in days")
    visited: Set[str] = Field(default_factory=set, description="Places already visited")
    previously_shown: Set[str] = Field(
        default_factory=set, description="Places already suggested"
    )


class ShuffleRequest(WireModel):
    """Request for one replacement place."""

    place_name: str = Field(min_length=1, description="Place being replaced")
    place_type: Optional[str] = Field(default=None, description="Category of the place")
    location: Location
    user_preferences: UserPreferences = Field(default_factory=UserPreferences)
    visited: Set[str] = Field(default_factory=set)
    previously_shown: Set[str] = Field(default_factory=set)

    def excluded_names(self) -> Set[str]:
        """Every name the replacement must not repeat."""
        return {self.place_name} | self.visited | self.previously_shown


class ChatRequest(WireModel):
    """Free-form chat message with optional context."""

    message: str = Field(min_length=1)
    context: Optional[Dict[str, Any]] = Field(default=None)


class CurrentItinerary(WireModel):
    """Itinerary being adjusted; every section may be empty."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    days: List[Dict[str, Any]] = Field(default_factory=list)
    cafes: List[Any] = Field(default_factory=list)
    medical: List[Any] = Field(default_factory=list)
    tips: List[Any] = Field(default_factory=list)


class ItineraryAdjustmentRequest(WireModel):
    """A disruption report plus the itinerary it affects."""

    user_message: str = Field(min_length=1, description="What went wrong")
    current_itinerary: CurrentItinerary
    location: Location
    user_preferences: UserPreferences = Field(default_factory=UserPreferences)
