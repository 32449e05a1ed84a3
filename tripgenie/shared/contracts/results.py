"""
Result shapes produced by the pipeline.

These are plain dicts decoded from model output, so they are typed as
TypedDicts rather than validated models: the validators only enforce the
mandatory fields and leave everything else exactly as the model wrote it.
"""

from typing import List, TypedDict


class Place(TypedDict, total=False):
    name: str
    type: str
    description: str
    timing: str
    transport: str
    distance: str


class Day(TypedDict, total=False):
    day: int
    places: List[Place]


class Cafe(TypedDict, total=False):
    name: str
    vibe: str
    price: str
    bestDish: str
    distance: str


class TripPlanResult(TypedDict):
    """Trip plan; `days` is mandatory and non-empty, the rest default to []."""

    days: List[Day]
    cafes: List[Cafe]
    medical: List[str]
    tips: List[str]


class ShuffleResult(TypedDict):
    new_place: str
    description: str


class AdjustmentResult(TypedDict, total=False):
    acknowledgment: str
    recommendation: str
    days: List[Day]
    cafes: List[Cafe]
    medical: List[str]
    tips: List[str]


class ChatResult(TypedDict):
    message: str


# Optional collections backfilled with [] when the model omits them
TRIP_PLAN_COLLECTIONS = ("cafes", "medical", "tips")
ADJUSTMENT_COLLECTIONS = ("days", "cafes", "medical", "tips")
