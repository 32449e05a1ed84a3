"""
Tests for the resilient parser.

Covers the stage escalation, the concrete reply shapes seen from models and
the diagnostics attached to failures.
"""

import json

import pytest

from tripgenie.parsing.parser import (
    EXCERPT_HEAD_CHARS,
    ParseStage,
    find_balanced_span,
    normalize_spacing,
    parse_model_response,
)
from tripgenie.shared.errors import NoJsonFound, ParseFailure


# ============================================================================
# Successful parses
# ============================================================================


class TestParseSuccess:
    """Replies that must decode."""

    def test_fenced_reply_with_preamble(self):
        """Prose plus a json fence decodes to the fenced object."""
        raw = 'Sure! ```json\n{"days":[{"day":1,"places":[]}]}\n```'
        outcome = parse_model_response(raw)
        assert outcome.value == {"days": [{"day": 1, "places": []}]}
        assert outcome.stage is ParseStage.SANITIZED

    def test_trailing_commas(self):
        """Trailing commas before closers are repaired."""
        outcome = parse_model_response('{"days":[{"day":1,"places":[],}],}')
        assert outcome.value == {"days": [{"day": 1, "places": []}]}

    def test_trailing_comma_same_as_clean_equivalent(self):
        """A single trailing comma yields the comma-free structure."""
        clean = '{"tips": ["a", "b"]}'
        assert parse_model_response('{"tips": ["a", "b",]}').value == json.loads(clean)

    @pytest.mark.parametrize("raw", [
        '{"a": 1}',
        '{"days": [{"day": 1, "places": [{"name": "Louvre", "type": "museum"}]}]}',
        '{"nested": {"list": [1, 2.5, null, true, false], "text": "braces {in} strings"}}',
        '  {"padded": "with whitespace"}  ',
    ])
    def test_valid_json_is_noop(self, raw):
        """Valid JSON decodes to exactly what the standard decoder returns."""
        outcome = parse_model_response(raw)
        assert outcome.value == json.loads(raw)
        assert outcome.stage is ParseStage.DIRECT
        assert len(outcome.attempts) == 1

    def test_fence_and_prose_removal_is_lossless(self):
        """Wrapping an object in a fence and prose does not change the result."""
        body = '{"new_place": "Musée d\'Orsay", "description": "Impressionists"}'
        wrapped = f"Here is a suggestion.\n```json\n{body}\n```\nLet me know!"
        assert parse_model_response(wrapped).value == json.loads(body)

    def test_multiline_string_keeps_newline(self):
        """Raw newlines inside string values survive as newlines."""
        outcome = parse_model_response('{"tips": ["Carry water.\nWear a hat."]}')
        assert outcome.value == {"tips": ["Carry water.\nWear a hat."]}

    def test_stray_closing_brace_after_object(self):
        """Text with a later stray '}' still decodes via the bracket scan."""
        raw = 'Result: {"a": {"b": 1}} and note: use } carefully'
        outcome = parse_model_response(raw)
        assert outcome.value == {"a": {"b": 1}}
        assert outcome.stage is ParseStage.BRACKET_SCAN

    def test_attempts_record_escalation(self):
        """Failed stages are recorded before the one that succeeded."""
        outcome = parse_model_response('```json\n{"a": 1,}\n```')
        stages = [a.stage for a in outcome.attempts]
        assert stages[0] is ParseStage.DIRECT
        assert outcome.attempts[0].succeeded is False
        assert outcome.attempts[-1].succeeded is True


# ============================================================================
# Failures
# ============================================================================


class TestParseFailures:
    """Replies that must be rejected with a descriptive error."""

    def test_no_json_here(self):
        """Plain prose raises NoJsonFound."""
        with pytest.raises(NoJsonFound):
            parse_model_response("no json here")

    @pytest.mark.parametrize("raw", ["", "   ", "\n\t", None])
    def test_empty_input(self, raw):
        """Empty or whitespace-only input fails with a non-empty message."""
        with pytest.raises(NoJsonFound) as exc_info:
            parse_model_response(raw)
        assert exc_info.value.message

    def test_unrepairable_json_raises_parse_failure(self):
        """A located but broken object raises ParseFailure with diagnostics."""
        raw = '{"days": [{"day": 1, "places": [}'
        with pytest.raises(ParseFailure) as exc_info:
            parse_model_response(raw)

        error = exc_info.value
        assert "Failed to parse AI response as JSON" in error.message
        assert f"Response length: {len(raw)}" in error.message
        assert "bracket_scan" in error.message
        assert error.details["raw_length"] == len(raw)
        assert [a["stage"] for a in error.details["attempts"]] == [
            "direct", "sanitized", "normalized", "bracket_scan",
        ]
        assert not any(a["succeeded"] for a in error.details["attempts"])

    def test_excerpt_is_bounded(self):
        """Diagnostics carry a bounded head and tail, not the whole reply."""
        raw = '{"tips": [' + '"x' * 2000 + "]}"
        with pytest.raises(ParseFailure) as exc_info:
            parse_model_response(raw)

        details = exc_info.value.details
        assert len(details["raw_head"]) == EXCERPT_HEAD_CHARS
        assert len(details["raw_tail"]) == 200
        assert details["raw_length"] == len(raw)


# ============================================================================
# Helpers
# ============================================================================


class TestHelpers:
    """Tests for the repair helpers."""

    def test_normalize_spacing(self):
        """Newlines, tabs and space runs collapse."""
        assert normalize_spacing('{\n\t"a" :  1 ,  "b":2}') == '{ "a":1 , "b":2}'

    def test_balanced_span_ignores_braces_in_strings(self):
        """Braces inside string literals do not affect depth."""
        text = 'x {"a": "}{", "b": [1]} y }'
        start, end = find_balanced_span(text)
        assert text[start:end + 1] == '{"a": "}{", "b": [1]}'

    def test_balanced_span_array(self):
        """Arrays are located as well as objects."""
        text = "list: [1, [2, 3]] done"
        start, end = find_balanced_span(text)
        assert text[start:end + 1] == "[1, [2, 3]]"

    def test_balanced_span_missing_opener(self):
        """No opener raises NoJsonFound."""
        with pytest.raises(NoJsonFound):
            find_balanced_span("nothing to see")
