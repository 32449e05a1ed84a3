"""
Tests for the prompt builders.

Prompts must be deterministic, must state the JSON output rules and must
render missing optional values as an explicit token.
"""

from tripgenie.prompts.builders import (
    build_adjustment_prompt,
    build_chat_prompt,
    build_shuffle_prompt,
    build_trip_plan_prompt,
    format_values,
)
from tripgenie.prompts.templates import NONE_PROVIDED
from tripgenie.shared.contracts.requests import (
    ChatRequest,
    ItineraryAdjustmentRequest,
    ShuffleRequest,
    TripRequest,
)


# ============================================================================
# Test Fixtures
# ============================================================================


def _make_trip_request(**overrides):
    """Create a trip request from wire-format (camelCase) data."""
    data = {
        "location": {
            "city": "Paris",
            "geotag": {"latitude": 48.8566, "longitude": 2.3522},
            "weather": {"temperature": 25, "condition": "Sunny"},
        },
        "userPreferences": {
            "interests": ["history", "art", "food"],
            "budget": 5000,
            "pace": "relaxed",
            "foodPreference": ["vegetarian"],
            "travelStyle": ["solo"],
        },
        "duration": 2,
        "visited": ["Louvre"],
        "previouslyShown": ["Eiffel Tower", "Arc de Triomphe"],
    }
    data.update(overrides)
    return TripRequest.model_validate(data)


JSON_RULES = [
    "Start with { and end with }",
    "NO markdown code blocks",
    "Use double quotes for ALL keys and strings",
    "NO trailing commas",
    "NO explanations",
]


# ============================================================================
# Trip plan
# ============================================================================


class TestTripPlanPrompt:
    """Tests for the trip plan prompt."""

    def test_embeds_context(self):
        """Preferences, location and exclusions all appear in the prompt."""
        prompt = build_trip_plan_prompt(_make_trip_request())

        assert "Generate a 2-day trip plan for Paris." in prompt
        assert "- Interests: art, food, history" in prompt
        assert "- Budget: 5000" in prompt
        assert "- Pace: relaxed" in prompt
        assert "- Coordinates: 48.8566, 2.3522" in prompt
        assert "- Weather: 25.0°C, Sunny" in prompt
        assert "- Already visited: Louvre" in prompt
        assert "- Previously shown: Arc de Triomphe, Eiffel Tower" in prompt

    def test_states_json_rules(self):
        """Every output-format rule is spelled out."""
        prompt = build_trip_plan_prompt(_make_trip_request())
        for rule in JSON_RULES:
            assert rule in prompt
        assert prompt.rstrip().endswith("ending with }.")

    def test_missing_values_render_none_provided(self):
        """Optional fields left out render as the explicit token."""
        request = TripRequest.model_validate({"location": {"city": "Lisbon"}})
        prompt = build_trip_plan_prompt(request)

        assert f"- Interests: {NONE_PROVIDED}" in prompt
        assert f"- Budget: {NONE_PROVIDED}" in prompt
        assert f"- Pace: {NONE_PROVIDED}" in prompt
        assert f"- Coordinates: {NONE_PROVIDED}" in prompt
        assert f"- Weather: {NONE_PROVIDED}" in prompt
        assert f"- Already visited: {NONE_PROVIDED}" in prompt
        assert "Generate a 3-day trip plan for Lisbon." in prompt

    def test_deterministic_across_input_order(self):
        """Equal requests produce byte-identical prompts whatever the list order."""
        first = _make_trip_request(previouslyShown=["Eiffel Tower", "Arc de Triomphe"])
        second = _make_trip_request(previouslyShown=["Arc de Triomphe", "Eiffel Tower"])
        assert build_trip_plan_prompt(first) == build_trip_plan_prompt(second)


# ============================================================================
# Shuffle, chat, adjustment
# ============================================================================


class TestOtherPrompts:
    """Tests for the shuffle, chat and adjustment prompts."""

    def test_shuffle_lists_exclusions(self):
        """The original place and every exclusion are named."""
        request = ShuffleRequest.model_validate({
            "placeName": "Louvre",
            "placeType": "museum",
            "location": {"city": "Paris"},
            "visited": ["Musée d'Orsay"],
            "previouslyShown": ["Centre Pompidou"],
        })
        prompt = build_shuffle_prompt(request)

        assert '- Name: "Louvre"' in prompt
        assert "- Type: museum" in prompt
        assert "NOT already visited: Musée d'Orsay" in prompt
        assert "NOT previously shown: Centre Pompidou" in prompt
        assert '"new_place"' in prompt
        for rule in JSON_RULES:
            assert rule in prompt

    def test_shuffle_without_type(self):
        """A missing place type renders as the explicit token."""
        request = ShuffleRequest.model_validate({
            "placeName": "Louvre",
            "location": {"city": "Paris"},
        })
        assert f"- Type: {NONE_PROVIDED}" in build_shuffle_prompt(request)

    def test_chat_prompt(self):
        """Chat embeds the message and context without the JSON rules."""
        request = ChatRequest(message="Is it safe to walk at night?", context={"city": "Rome"})
        prompt = build_chat_prompt(request)

        assert "User message: Is it safe to walk at night?" in prompt
        assert 'Context: {"city": "Rome"}' in prompt
        assert "NO markdown code blocks" not in prompt

    def test_chat_prompt_without_context(self):
        """Missing chat context renders as the explicit token."""
        prompt = build_chat_prompt(ChatRequest(message="Hello"))
        assert f"Context: {NONE_PROVIDED}" in prompt

    def test_adjustment_prompt(self):
        """The disruption and the current itinerary are embedded."""
        request = ItineraryAdjustmentRequest.model_validate({
            "userMessage": "It started raining",
            "currentItinerary": {"days": [{"day": 1, "places": [{"name": "Park Güell"}]}]},
            "location": {"city": "Barcelona"},
        })
        prompt = build_adjustment_prompt(request)

        assert '"It started raining"' in prompt
        assert '"name": "Park Güell"' in prompt
        assert '"acknowledgment"' in prompt
        for rule in JSON_RULES:
            assert rule in prompt

    def test_adjustment_with_empty_itinerary(self):
        """An empty itinerary renders as the explicit token."""
        request = ItineraryAdjustmentRequest.model_validate({
            "userMessage": "Flight delayed",
            "currentItinerary": {},
            "location": {"city": "Oslo"},
        })
        assert f"CURRENT ITINERARY:\n{NONE_PROVIDED}" in build_adjustment_prompt(request)


class TestFormatValues:
    """Tests for collection rendering."""

    def test_sorted_and_deduplicated(self):
        assert format_values({"b", "a", " a "}) == "a, b"

    def test_empty(self):
        assert format_values(set()) == NONE_PROVIDED
        assert format_values(None) == NONE_PROVIDED


class TestUserContextCoverage:
    """Every piece of traveler context reaches the prompt."""

    def test_adjustment_includes_food_and_travel_style(self):
        request = ItineraryAdjustmentRequest.model_validate({
            "userMessage": "The museum is closed",
            "currentItinerary": {},
            "location": {"city": "Berlin"},
            "userPreferences": {"foodPreference": ["vegan"], "travelStyle": ["backpacker"]},
        })
        prompt = build_adjustment_prompt(request)

        assert "- Food: vegan" in prompt
        assert "- Travel Style: backpacker" in prompt

    def test_adjustment_missing_food_and_travel_style(self):
        request = ItineraryAdjustmentRequest.model_validate({
            "userMessage": "The museum is closed",
            "currentItinerary": {},
            "location": {"city": "Berlin"},
        })
        prompt = build_adjustment_prompt(request)

        assert f"- Food: {NONE_PROVIDED}" in prompt
        assert f"- Travel Style: {NONE_PROVIDED}" in prompt

    def test_address_rendered_everywhere(self):
        """A resolved address appears in the trip, shuffle and adjustment prompts."""
        location = {"city": "Paris", "address": "Paris, Île-de-France, France"}
        prompts = [
            build_trip_plan_prompt(TripRequest.model_validate({"location": location})),
            build_shuffle_prompt(ShuffleRequest.model_validate({
                "placeName": "Louvre", "location": location,
            })),
            build_adjustment_prompt(ItineraryAdjustmentRequest.model_validate({
                "userMessage": "Rain", "currentItinerary": {}, "location": location,
            })),
        ]
        for prompt in prompts:
            assert "- Address: Paris, Île-de-France, France" in prompt

    def test_missing_address(self):
        request = TripRequest.model_validate({"location": {"city": "Lisbon"}})
        assert f"- Address: {NONE_PROVIDED}" in build_trip_plan_prompt(request)
