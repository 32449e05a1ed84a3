"""
Debug logger for model calls, parse attempts and endpoint timing.

Writes per-request JSON Lines files under DEBUG_LOG_DIR/<request_id>/.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


# Request-scoped registry so every node of one request shares a logger
_logger_registry: Dict[str, "DebugLogger"] = {}


def get_or_create_logger(request_id: str, logs_dir: str = "logs") -> "DebugLogger":
    """
    Get the logger for a request, creating it on first use.

    Args:
        request_id: Unique request identifier
        logs_dir: Base directory for log files

    Returns:
        DebugLogger instance for this request
    """
    if request_id not in _logger_registry:
        _logger_registry[request_id] = DebugLogger(request_id, logs_dir)
    return _logger_registry[request_id]


def get_logger(request_id: Optional[str]) -> Optional["DebugLogger"]:
    """Return the registered logger for a request, if debug logging is on for it."""
    if request_id is None:
        return None
    return _logger_registry.get(request_id)


def remove_logger(request_id: str) -> None:
    """Remove a request's logger from the registry."""
    _logger_registry.pop(request_id, None)


class DebugLogger:
    """
    Per-request debug log in JSON Lines format.

    Tracks the prompt/response pair of each model call, the outcome of every
    parse stage and the total endpoint duration.
    """

    def __init__(self, request_id: str, logs_dir: str = "logs"):
        self.request_id = request_id
        self.request_dir = Path(logs_dir) / request_id
        self.log_file = self.request_dir / "request_log.json"
        self.request_dir.mkdir(parents=True, exist_ok=True)

        self._llm_duration_ms = 0.0
        self._llm_call_count = 0

    def _get_timestamp(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    def _append_to_log(self, entry: Dict[str, Any]) -> None:
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")

    def log_llm_call(
        self,
        backend: str,
        prompt: str,
        response: str,
        duration_ms: float,
    ) -> None:
        """
        Log one model call.

        Args:
            backend: Name of the backend that served the call
            prompt: Rendered prompt
            response: Raw model reply
            duration_ms: Call duration in milliseconds
        """
        self._llm_duration_ms += duration_ms
        self._llm_call_count += 1

        self._append_to_log({
            "type": "llm_call",
            "timestamp": self._get_timestamp(),
            "request_id": self.request_id,
            "backend": backend,
            "prompt": prompt,
            "response": response,
            "prompt_chars": len(prompt),
            "response_chars": len(response),
            "duration_ms": round(duration_ms, 2),
        })

    def log_parse_attempt(self, stage: str, succeeded: bool, error: Optional[str] = None) -> None:
        """Log the outcome of one parse stage."""
        entry = {
            "type": "parse_attempt",
            "timestamp": self._get_timestamp(),
            "request_id": self.request_id,
            "stage": stage,
            "succeeded": succeeded,
        }
        if error:
            entry["error"] = error
        self._append_to_log(entry)

    def log_api_timing(
        self,
        endpoint: str,
        duration_ms: float,
        success: bool = True,
        error: Optional[str] = None,
    ) -> None:
        """
        Log endpoint timing.

        Args:
            endpoint: API endpoint path (e.g. "/api/ai/trip-plan")
            duration_ms: Total time for the request in milliseconds
            success: Whether the request succeeded
            error: Error message if it failed
        """
        entry = {
            "type": "api_timing",
            "timestamp": self._get_timestamp(),
            "request_id": self.request_id,
            "endpoint": endpoint,
            "duration_ms": round(duration_ms, 2),
            "llm_calls": self._llm_call_count,
            "llm_duration_ms": round(self._llm_duration_ms, 2),
            "success": success,
        }
        if error:
            entry["error"] = error
        self._append_to_log(entry)
