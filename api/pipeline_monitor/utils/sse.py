from __future__ import annotations
import json
import time
from typing import Any, Dict, Optional


def create_sse_message(data: Dict[str, Any], event_type: str = "message", event_id: Optional[str] = None) -> str:
    """Format one Server-Sent Event."""
    lines = []
    if event_id:
        lines.append(f"id: {event_id}")
    lines.append(f"event: {event_type}")
    lines.append(f"data: {json.dumps(data, ensure_ascii=False, default=str)}")
    return "\n".join(lines) + "\n\n"


def create_sse_heartbeat() -> str:
    return create_sse_message({"type": "heartbeat", "timestamp": time.time()}, event_type="heartbeat")
