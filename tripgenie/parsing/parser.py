"""
Resilient JSON parsing of model replies.

Parsing escalates through a fixed list of stages, stopping at the first one
whose candidate decodes. Every stage derives its candidate from the original
text, never from another stage's output.

    direct        -> the raw reply as-is
    sanitized     -> sanitize() (fences, prose, trailing commas, control chars)
    normalized    -> sanitized, then whitespace collapsed and spacing normalized
    bracket_scan  -> first '{' or '[' to its matching closer via a string-aware
                     depth counter, then trailing commas removed
"""

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from tripgenie.parsing.sanitizer import (
    iter_string_flags,
    remove_trailing_commas,
    repair_control_characters,
    sanitize,
    strip_bom,
    strip_code_fences,
)
from tripgenie.shared.errors import NoJsonFound, ParseFailure


logger = logging.getLogger(__name__)


EXCERPT_HEAD_CHARS = 500
EXCERPT_TAIL_CHARS = 200
PREVIEW_CHARS = 200

_OPENERS = {"{": "}", "[": "]"}


class ParseStage(str, Enum):
    DIRECT = "direct"
    SANITIZED = "sanitized"
    NORMALIZED = "normalized"
    BRACKET_SCAN = "bracket_scan"


@dataclass(frozen=True)
class ParseAttempt:
    """Outcome of one parse stage."""

    stage: ParseStage
    succeeded: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        entry = {"stage": self.stage.value, "succeeded": self.succeeded}
        if self.error:
            entry["error"] = self.error
        return entry


@dataclass
class ParseOutcome:
    """Successful parse: the decoded value and the stage that produced it."""

    value: Any
    stage: ParseStage
    attempts: List[ParseAttempt] = field(default_factory=list)


def normalize_spacing(text: str) -> str:
    """Collapse newlines/tabs/runs of spaces and tighten spacing around ':' and ','."""
    normalized = text.replace("\r", "")
    normalized = normalized.replace("\n", " ").replace("\t", " ")
    normalized = re.sub(r" {2,}", " ", normalized)
    normalized = re.sub(r'"\s*:\s*', '":', normalized)
    normalized = re.sub(r'"\s*,\s*"', '","', normalized)
    return normalized.strip()


def find_balanced_span(text: str) -> Tuple[int, int]:
    """
    Locate the first JSON object or array and its matching closer.

    Braces and brackets inside string literals are ignored. If the structure
    never closes (e.g. a truncated reply), the last matching closer in the
    text is used instead.

    Returns:
        (start, end) indices, end inclusive

    Raises:
        NoJsonFound: If no opener, or no closer at all, is present
    """
    start = -1
    depth = 0
    for i, (ch, in_string) in enumerate(iter_string_flags(text)):
        if in_string:
            continue
        if start == -1:
            if ch in _OPENERS:
                start = i
                depth = 1
            continue
        if ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return start, i

    if start == -1:
        raise NoJsonFound(
            "No JSON object or array found in response",
            details={"raw_length": len(text)},
        )

    end = text.rfind(_OPENERS[text[start]])
    if end <= start:
        raise NoJsonFound(
            "JSON structure in response is never closed",
            details={"raw_length": len(text)},
        )
    return start, end


def direct_candidate(text: str) -> str:
    return text


def sanitized_candidate(text: str) -> str:
    return sanitize(text)


def normalized_candidate(text: str) -> str:
    return normalize_spacing(sanitize(text))


def bracket_scan_candidate(text: str) -> str:
    cleaned = strip_code_fences(strip_bom(text))
    start, end = find_balanced_span(cleaned)
    candidate = repair_control_characters(cleaned[start:end + 1])
    return remove_trailing_commas(candidate)


STAGES: List[Tuple[ParseStage, Callable[[str], str]]] = [
    (ParseStage.DIRECT, direct_candidate),
    (ParseStage.SANITIZED, sanitized_candidate),
    (ParseStage.NORMALIZED, normalized_candidate),
    (ParseStage.BRACKET_SCAN, bracket_scan_candidate),
]


def build_diagnostics(text: str, attempts: List[ParseAttempt]) -> Dict[str, Any]:
    """Bounded excerpt of the offending text plus the per-stage outcomes."""
    return {
        "raw_length": len(text),
        "raw_head": text[:EXCERPT_HEAD_CHARS],
        "raw_tail": text[-EXCERPT_TAIL_CHARS:] if len(text) > EXCERPT_HEAD_CHARS else "",
        "attempts": [a.to_dict() for a in attempts],
    }


def parse_model_response(text: Optional[str]) -> ParseOutcome:
    """
    Decode a model reply into a JSON value, escalating repairs as needed.

    Args:
        text: Raw model reply

    Returns:
        ParseOutcome with the decoded value and the stage that succeeded

    Raises:
        NoJsonFound: If the reply is empty or contains no JSON span at all
        ParseFailure: If a span was found but no stage could decode it
    """
    if text is None or not text.strip():
        raise NoJsonFound(
            "Empty response from model; no JSON object found",
            details={"raw_length": len(text or "")},
        )

    attempts: List[ParseAttempt] = []
    located = False

    for stage, derive in STAGES:
        try:
            candidate = derive(text)
        except NoJsonFound as e:
            attempts.append(ParseAttempt(stage, False, e.message))
            continue

        if stage is not ParseStage.DIRECT:
            located = True

        try:
            value = json.loads(candidate)
        except json.JSONDecodeError as e:
            reason = f"{e.msg} (line {e.lineno}, column {e.colno})"
            logger.debug(f"Parse stage '{stage.value}' failed: {reason}")
            attempts.append(ParseAttempt(stage, False, reason))
            continue

        attempts.append(ParseAttempt(stage, True))
        if stage is not ParseStage.DIRECT:
            logger.info(f"Parsed model response at stage '{stage.value}'")
        return ParseOutcome(value=value, stage=stage, attempts=attempts)

    diagnostics = build_diagnostics(text, attempts)

    if not located:
        logger.error(f"No JSON found in model response | length={len(text)}")
        raise NoJsonFound("No valid JSON object found in response", details=diagnostics)

    last = attempts[-1]
    logger.error(
        f"All parse stages failed | length={len(text)}, "
        f"last_stage={last.stage.value}, error={last.error}"
    )
    preview = text[:PREVIEW_CHARS]
    raise ParseFailure(
        f"Failed to parse AI response as JSON. "
        f"Stage '{last.stage.value}' failed: {last.error}. "
        f"Response length: {len(text)}. Preview: {preview}...",
        details=diagnostics,
    )
