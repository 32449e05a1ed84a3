"""
Shape validation of parsed model replies.

Validators enforce only the mandatory fields of each result and backfill the
optional collections with []. Everything else is passed through exactly as the
model wrote it.
"""

import logging
from typing import Any, Callable, Dict, Iterable, Optional

from tripgenie.shared.contracts.requests import ShuffleRequest
from tripgenie.shared.contracts.results import (
    ADJUSTMENT_COLLECTIONS,
    TRIP_PLAN_COLLECTIONS,
    AdjustmentResult,
    ChatResult,
    ShuffleResult,
    TripPlanResult,
)
from tripgenie.shared.errors import InvalidShape


logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Case- and whitespace-insensitive form of a place name."""
    return " ".join(name.split()).casefold()


def _require_object(data: Any, kind: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise InvalidShape(
            f"AI response for {kind} must be a JSON object, got {type(data).__name__}",
            details={"received_type": type(data).__name__},
        )
    return dict(data)


def _require_text(data: Dict[str, Any], field: str, kind: str) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise InvalidShape(
            f"AI response for {kind} is missing required field '{field}'",
            field=field,
            details={"received_keys": sorted(data.keys())},
        )
    return value


def _backfill(data: Dict[str, Any], collections: Iterable[str]) -> Dict[str, Any]:
    for key in collections:
        if not data.get(key):
            data[key] = []
    return data


def validate_trip_plan(data: Any, request: Any = None) -> TripPlanResult:
    """
    Validate a trip plan reply.

    Raises:
        InvalidShape: If the reply is not an object or `days` is missing/empty
    """
    result = _require_object(data, "trip plan")
    days = result.get("days")
    if not isinstance(days, list) or not days:
        raise InvalidShape(
            "AI response for trip plan is missing required field 'days'",
            field="days",
            details={"received_keys": sorted(result.keys())},
        )
    return _backfill(result, TRIP_PLAN_COLLECTIONS)


def validate_shuffle(data: Any, request: Optional[ShuffleRequest] = None) -> ShuffleResult:
    """
    Validate a replacement-place reply.

    Both `new_place` and `description` are mandatory. When the request is
    given, the new place must also differ from the original place and from
    every excluded name.

    Raises:
        InvalidShape: If a field is missing or the place repeats an exclusion
    """
    result = _require_object(data, "shuffle")
    new_place = _require_text(result, "new_place", "shuffle")
    _require_text(result, "description", "shuffle")

    if request is not None:
        excluded = {normalize_name(name) for name in request.excluded_names()}
        if normalize_name(new_place) in excluded:
            logger.warning(f"Shuffle reply repeated an excluded place: '{new_place}'")
            raise InvalidShape(
                f"AI suggested '{new_place}', which was already visited, shown or replaced",
                field="new_place",
                details={"new_place": new_place, "original_place": request.place_name},
            )
    return result


def validate_adjustment(data: Any, request: Any = None) -> AdjustmentResult:
    """Validate an itinerary adjustment reply; every collection is optional."""
    result = _require_object(data, "itinerary adjustment")
    return _backfill(result, ADJUSTMENT_COLLECTIONS)


def wrap_chat(raw_response: str) -> ChatResult:
    """Chat replies are free text and are returned as-is."""
    return {"message": raw_response}


VALIDATORS: Dict[str, Callable[[Any, Any], dict]] = {
    "trip_plan": validate_trip_plan,
    "shuffle": validate_shuffle,
    "adjustment": validate_adjustment,
}
