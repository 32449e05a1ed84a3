"""Prompt templates and builders for the AI endpoints."""

from tripgenie.prompts.templates import NONE_PROVIDED, PromptContext
from tripgenie.prompts.builders import (
    build_adjustment_prompt,
    build_chat_prompt,
    build_shuffle_prompt,
    build_trip_plan_prompt,
)

__all__ = [
    "NONE_PROVIDED",
    "PromptContext",
    "build_adjustment_prompt",
    "build_chat_prompt",
    "build_shuffle_prompt",
    "build_trip_plan_prompt",
]
