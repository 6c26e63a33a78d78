from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Small helpers shared by the engine and its adapters.
"""
import asyncio


def clamp_str(s: str, max_chars: int) -> str:
    if len(s) <= max_chars:
        return s
    return s[:max_chars] + "…"


def backoff_delay(attempt: int, base_s: float, max_s: float) -> float:
    """
    Capped exponential backoff.
    attempt=0 => base, attempt=1 => 2*base, ... never above max_s.
    """
    return min(base_s * (2 ** attempt), max_s)


def run_sync(coro):
    """
    Run an async coroutine from sync context.
    If already inside a running event loop, raise a clear error.
    """
    try:
        # If this succeeds, we're inside a running event loop context.
        asyncio.get_running_loop()
    except RuntimeError:
        # No running loop in this thread => safe to use asyncio.run
        return asyncio.run(coro)

    # If we got here, we are in a running loop (can't nest asyncio.run).
    coro.close()
    raise RuntimeError(
        "Cannot use *_sync methods inside a running event loop. Use async methods instead."
    )
