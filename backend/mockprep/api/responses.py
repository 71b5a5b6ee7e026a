"""Success envelope shared by every endpoint."""

from __future__ import annotations

from typing import Any, Dict, Optional


def envelope(
    data: Any = None, *, message: Optional[str] = None, count: Optional[int] = None
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if count is not None:
        body["count"] = count
    if data is not None:
        body["data"] = data
    return body
