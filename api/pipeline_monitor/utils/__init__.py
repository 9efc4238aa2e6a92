"""
Utility helpers.

Provides:
- JavaScript-compatible rounding for percentages
- Server-sent events formatting
"""

from .rounding import round_half_up, percent
from .sse import create_sse_message, create_sse_heartbeat

__all__ = [
    "round_half_up",
    "percent",
    "create_sse_message",
    "create_sse_heartbeat",
]
