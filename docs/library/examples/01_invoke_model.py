"""
Example 01: Invoke a catalog model directly through the engine.

Run:
    OPENROUTER_API_KEY=... REPLICATE_API_TOKEN=... \
        python docs/library/examples/01_invoke_model.py
"""

from __future__ import annotations

import asyncio
import os

from polygate import InvocationEngine, Message, ModelCatalog, configure_logging
from polygate.llms import InvocationLifecycleEvent


def print_event(event: InvocationLifecycleEvent) -> None:
    print(f"[{event.event_type}] {event.request_id} {event.provider_id} {event.latency_ms}")


async def main() -> None:
    configure_logging()
    model_name = os.getenv("POLYGATE_MODEL", "gpt-5-codex")
    effort = os.getenv("POLYGATE_EFFORT", "medium")

    async with InvocationEngine(ModelCatalog.builtin(), observers=[print_event]) as engine:
        text = await engine.invoke(
            model_name,
            [
                Message(role="system", input_text="Answer in one short paragraph."),
                Message(role="user", input_text="What does a message broker do?"),
            ],
            control_value=effort,
        )

    print("model:", model_name)
    print("text:", text)


if __name__ == "__main__":
    asyncio.run(main())
