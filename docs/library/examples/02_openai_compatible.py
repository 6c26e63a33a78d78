"""
Example 02: Structured output through the OpenAI-compatible surface.

Run:
    OPENROUTER_API_KEY=... REPLICATE_API_TOKEN=... \
        python docs/library/examples/02_openai_compatible.py
"""

from __future__ import annotations

import asyncio
import json
import os

from pydantic import BaseModel, Field

from polygate import InvocationEngine, ModelCatalog
from polygate.api import route


class Plan(BaseModel):
    title: str = Field(min_length=1)
    steps: list[str] = Field(min_length=2, max_length=8)


async def main() -> None:
    body = {
        "model": os.getenv("POLYGATE_MODEL", "grok-4-fast"),
        "reasoning_effort": "low",
        "messages": [
            {
                "role": "user",
                "content": "Create a small onboarding plan for a new backend engineer.",
            }
        ],
        "response_format": {
            "type": "json_schema",
            "json_schema": {
                "name": "Plan",
                "schema": Plan.model_json_schema(),
                "strict": True,
            },
        },
    }

    async with InvocationEngine(ModelCatalog.builtin()) as engine:
        completion = await route(engine, "/v1/chat/completions", body)

    content = completion["choices"][0]["message"]["content"]
    print("usage:", json.dumps(completion["usage"]))
    print("parsed:", Plan.model_validate_json(content))


if __name__ == "__main__":
    asyncio.run(main())
