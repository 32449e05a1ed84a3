"""Response envelope shared by every /api/ai endpoint."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """`{success, data?, error?, details?}`; absent fields are omitted."""

    success: bool = Field(description="Whether the request succeeded")
    data: Optional[Any] = Field(default=None, description="Endpoint payload")
    error: Optional[str] = Field(default=None, description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None, description="Diagnostics; only outside production"
    )


def success_payload(data: Any) -> Dict[str, Any]:
    return {"success": True, "data": data}
