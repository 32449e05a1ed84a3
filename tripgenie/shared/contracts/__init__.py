"""Request and result contracts shared by the prompts, pipeline and API."""

from tripgenie.shared.contracts.requests import (
    ChatRequest,
    ItineraryAdjustmentRequest,
    Location,
    Pace,
    ShuffleRequest,
    TripRequest,
    UserPreferences,
)
from tripgenie.shared.contracts.results import (
    AdjustmentResult,
    ChatResult,
    ShuffleResult,
    TripPlanResult,
)

__all__ = [
    "ChatRequest",
    "ItineraryAdjustmentRequest",
    "Location",
    "Pace",
    "ShuffleRequest",
    "TripRequest",
    "UserPreferences",
    "AdjustmentResult",
    "ChatResult",
    "ShuffleResult",
    "TripPlanResult",
]
