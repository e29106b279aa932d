from __future__ import annotations

from typing import Any, Dict, Optional

import httpx


def read_json_object(response: httpx.Response) -> Optional[Dict[str, Any]]:
    """Decode a response body that must be a JSON object.

    Returns ``None`` for non-JSON bodies (proxy error pages) and for JSON
    values that are not objects, so callers can raise their own stage error.
    """
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


__all__ = ["read_json_object"]
