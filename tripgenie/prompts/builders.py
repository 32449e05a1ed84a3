"""
Prompt builders for the TripGenie endpoints.

Pure functions: the same request always renders the same prompt. Set-valued
fields are sorted before rendering so that holds regardless of input order.
"""

import json
from typing import Iterable, Optional

from tripgenie.prompts.templates import (
    ADJUSTMENT_TEMPLATE,
    CHAT_PREAMBLE,
    CHAT_TEMPLATE,
    JSON_REMINDER,
    NONE_PROVIDED,
    SHUFFLE_TEMPLATE,
    SYSTEM_PREAMBLE,
    TRIP_PLAN_TEMPLATE,
    PromptContext,
)
from tripgenie.shared.contracts.requests import (
    ChatRequest,
    ItineraryAdjustmentRequest,
    Location,
    ShuffleRequest,
    TripRequest,
    UserPreferences,
)


def format_values(values: Optional[Iterable[str]]) -> str:
    """Render a collection as a sorted comma-separated list, or NONE_PROVIDED."""
    cleaned = sorted({v.strip() for v in values or () if v and v.strip()})
    return ", ".join(cleaned) if cleaned else NONE_PROVIDED


def format_location(location: Location) -> dict:
    """Render the address, coordinate and weather lines of a location."""
    coordinates = NONE_PROVIDED
    if location.geotag is not None:
        coordinates = f"{location.geotag.latitude}, {location.geotag.longitude}"

    weather = NONE_PROVIDED
    if location.weather is not None:
        weather = f"{location.weather.temperature}°C, {location.weather.condition}"

    address = (location.address or "").strip() or NONE_PROVIDED

    return {"address": address, "coordinates": coordinates, "weather": weather}


def build_prompt_context(
    location: Location,
    preferences: UserPreferences,
    visited: Optional[Iterable[str]] = None,
    previously_shown: Optional[Iterable[str]] = None,
    duration: Optional[int] = None,
) -> PromptContext:
    """
    Build the context block shared by every prompt.

    Args:
        location: Destination with optional coordinates/weather
        preferences: Traveler preferences
        visited: Places already visited
        previously_shown: Places already suggested
        duration: Trip length in days, when relevant

    Returns:
        PromptContext ready for template formatting
    """
    budget = NONE_PROVIDED if preferences.budget is None else str(preferences.budget)
    pace = NONE_PROVIDED if preferences.pace is None else preferences.pace.value

    return PromptContext(
        city=location.city.strip(),
        interests=format_values(preferences.interests),
        budget=budget,
        pace=pace,
        food_preference=format_values(preferences.food_preference),
        travel_style=format_values(preferences.travel_style),
        visited=format_values(visited),
        previously_shown=format_values(previously_shown),
        duration=duration,
        **format_location(location),
    )


def wrap_json_prompt(body: str) -> str:
    """Surround an endpoint prompt with the JSON output rules."""
    return f"{SYSTEM_PREAMBLE}\n\nUser Request:\n{body}{JSON_REMINDER}"


def build_trip_plan_prompt(request: TripRequest) -> str:
    """
    Build the prompt for a full trip plan.

    Args:
        request: Trip plan request

    Returns:
        Complete prompt string
    """
    context = build_prompt_context(
        location=request.location,
        preferences=request.user_preferences,
        visited=request.visited,
        previously_shown=request.previously_shown,
        duration=request.duration,
    )
    return wrap_json_prompt(context.format_prompt(TRIP_PLAN_TEMPLATE))


def build_shuffle_prompt(request: ShuffleRequest) -> str:
    """
    Build the prompt asking for one replacement place.

    Args:
        request: Shuffle request

    Returns:
        Complete prompt string
    """
    context = build_prompt_context(
        location=request.location,
        preferences=request.user_preferences,
        visited=request.visited,
        previously_shown=request.previously_shown,
    )
    place_type = (request.place_type or "").strip() or NONE_PROVIDED
    body = context.format_prompt(
        SHUFFLE_TEMPLATE,
        place_name=request.place_name.strip(),
        place_type=place_type,
    )
    return wrap_json_prompt(body)


def build_chat_prompt(request: ChatRequest) -> str:
    """
    Build the free-form chat prompt.

    The context object, when given, is embedded as key-sorted JSON.
    """
    context = NONE_PROVIDED
    if request.context:
        context = json.dumps(request.context, sort_keys=True, ensure_ascii=False, default=str)

    body = CHAT_TEMPLATE.format(message=request.message.strip(), context=context)
    return f"{CHAT_PREAMBLE}\n\n{body}"


def build_adjustment_prompt(request: ItineraryAdjustmentRequest) -> str:
    """
    Build the Plan B prompt that adapts an itinerary to a disruption.

    Args:
        request: Adjustment request with the current itinerary

    Returns:
        Complete prompt string
    """
    context = build_prompt_context(
        location=request.location,
        preferences=request.user_preferences,
    )

    itinerary = request.current_itinerary.model_dump()
    if any(itinerary.get(section) for section in itinerary):
        current_itinerary = json.dumps(itinerary, indent=2, sort_keys=True, ensure_ascii=False)
    else:
        current_itinerary = NONE_PROVIDED

    body = context.format_prompt(
        ADJUSTMENT_TEMPLATE,
        user_message=request.user_message.strip(),
        current_itinerary=current_itinerary,
    )
    return wrap_json_prompt(body)
