"""
Prompt templates for the TripGenie endpoints.

The JSON endpoints share one preamble that spells out the exact output
format; the downstream parser repairs what it can, but it works best when
the model is told which mistakes to avoid.
"""

from typing import Optional

from pydantic import BaseModel, Field


NONE_PROVIDED = "none provided"


class PromptContext(BaseModel):
    """
    Rendered request context shared by every prompt.

    All values are already strings; optional inputs that were missing carry
    NONE_PROVIDED so the model never silently assumes a default.
    """

    city: str = Field(description="Destination city")
    address: str = Field(default=NONE_PROVIDED)
    coordinates: str = Field(default=NONE_PROVIDED)
    weather: str = Field(default=NONE_PROVIDED)
    interests: str = Field(default=NONE_PROVIDED)
    budget: str = Field(default=NONE_PROVIDED)
    pace: str = Field(default=NONE_PROVIDED)
    food_preference: str = Field(default=NONE_PROVIDED)
    travel_style: str = Field(default=NONE_PROVIDED)
    visited: str = Field(default=NONE_PROVIDED)
    previously_shown: str = Field(default=NONE_PROVIDED)
    duration: Optional[int] = Field(default=None)

    def format_prompt(self, template: str, **extra: object) -> str:
        """
        Fill `template` with this context plus any endpoint-specific values.

        Args:
            template: One of the *_TEMPLATE strings
            **extra: Additional placeholders (e.g. place_name)

        Returns:
            Formatted prompt string
        """
        values = self.model_dump()
        values["duration"] = self.duration if self.duration is not None else NONE_PROVIDED
        values.update(extra)
        return template.format(**values)


SYSTEM_PREAMBLE = """You are TripGenie, an AI travel engine and trip planner.

You combine:
- The interests the traveler selected
- Popularity reasoning about real, well-reviewed places
- Weather-aware timing (advisory, never restrictive)
- Cafes and food recommendations
- Location-aware suggestions and realistic distances
- Nearby pharmacies and medical help
- Memory of places already visited or shown

====================================================
### CRITICAL JSON OUTPUT REQUIREMENTS

YOU MUST RETURN VALID JSON AND NOTHING ELSE.

RULES:
1. Start with { and end with }
2. NO markdown code blocks (no ```json or ```)
3. NO explanations, preambles or conclusions outside the JSON
4. Use double quotes for ALL keys and strings
5. NO trailing commas before } or ]
6. Escape special characters inside strings (\\n for newlines, \\" for quotes)
===================================================="""

JSON_REMINDER = (
    "\n\n**CRITICAL**: Return ONLY valid JSON. No text before or after. "
    "No markdown. Just the JSON object starting with { and ending with }."
)

CHAT_PREAMBLE = """You are TripGenie, a friendly travel assistant.
Answer in plain conversational text. Be concise and practical."""


TRIP_PLAN_TEMPLATE = """Generate a {duration}-day trip plan for {city}.

USER PREFERENCES:
- Interests: {interests}
- Budget: {budget}
- Pace: {pace}
- Food: {food_preference}
- Travel Style: {travel_style}

LOCATION DATA:
- City: {city}
- Address: {address}
- Coordinates: {coordinates}
- Weather: {weather}

EXCLUSIONS (do not suggest these again):
- Already visited: {visited}
- Previously shown: {previously_shown}

Provide REAL, SPECIFIC places that actually exist in {city}. Do NOT use generic or fictional names.

Provide:
1. Day-wise itinerary with 3-5 real attractions per day
2. Timing recommendations based on the weather
3. 4-7 real cafe/restaurant suggestions with vibe, price range and best dish
4. 2-3 real nearby pharmacies or medical stores
5. Transport recommendations between places with realistic distances
6. 3-5 weather-appropriate tips

REQUIRED JSON STRUCTURE:
{{
  "days": [
    {{
      "day": 1,
      "places": [
        {{
          "name": "Real Place Name",
          "type": "attraction",
          "description": "Brief description",
          "timing": "Morning 9 AM - 12 PM",
          "transport": "Cab",
          "distance": "2.5 km"
        }}
      ]
    }}
  ],
  "cafes": [
    {{
      "name": "Real Cafe Name",
      "vibe": "Cozy, casual",
      "price": "₹500-800",
      "bestDish": "Signature dish",
      "distance": "1.2 km"
    }}
  ],
  "medical": ["Pharmacy Name - Area"],
  "tips": ["Travel tip"]
}}

FIELD REQUIREMENTS:
- "days": exactly {duration} objects, one per day, "day" is a number
- Every place and cafe field is a string
- "medical" and "tips" are arrays of strings"""


SHUFFLE_TEMPLATE = """SHUFFLE RECOMMENDATION - Find Alternative

ORIGINAL PLACE:
- Name: "{place_name}"
- Type: {place_type}

REPLACEMENT MUST BE:
- Same type/category as the original ({place_type})
- Located in {city} (a REAL place that actually exists)
- A match for the traveler's interests: {interests}
- Different from "{place_name}"
- NOT already visited: {visited}
- NOT previously shown: {previously_shown}

TRAVELER:
- Budget: {budget}
- Pace: {pace}
- Food: {food_preference}
- Travel Style: {travel_style}

CURRENT CONDITIONS:
- Address: {address}
- Coordinates: {coordinates}
- Weather: {weather}

Give a 1-2 sentence reason why the replacement is a good alternative.

REQUIRED JSON STRUCTURE:
{{
  "new_place": "Exact Name of Real Place in {city}",
  "description": "Why this is a good alternative"
}}"""


CHAT_TEMPLATE = """User message: {message}

Context: {context}

Respond as TripGenie with helpful travel advice."""


ADJUSTMENT_TEMPLATE = """PLAN B - Adjust Itinerary

The traveler in {city} reports a disruption:
"{user_message}"

CURRENT ITINERARY:
{current_itinerary}

TRAVELER:
- Interests: {interests}
- Budget: {budget}
- Pace: {pace}
- Food: {food_preference}
- Travel Style: {travel_style}

LOCATION DATA:
- City: {city}
- Address: {address}
- Coordinates: {coordinates}
- Weather: {weather}

Acknowledge what happened, recommend how to recover, and return the
adjusted itinerary. Keep places that still fit; replace or reschedule the
ones the disruption affects. Use REAL places that exist in {city}.

REQUIRED JSON STRUCTURE:
{{
  "acknowledgment": "Short empathetic acknowledgment",
  "recommendation": "What to do now",
  "days": [
    {{
      "day": 1,
      "places": [
        {{
          "name": "Real Place Name",
          "type": "attraction",
          "description": "Brief description",
          "timing": "Afternoon 2 PM - 5 PM",
          "transport": "Walking",
          "distance": "0.8 km"
        }}
      ]
    }}
  ],
  "cafes": [],
  "medical": [],
  "tips": []
}}"""
