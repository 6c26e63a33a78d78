"""
Run one OpenAI-compatible request body from stdin against the builtin catalog.

    echo '{"model": "grok-4-fast", "messages": [{"role": "user", "content": "ping"}]}' \
        | python main.py /v1/chat/completions
"""

import asyncio
import json
import sys

from polygate import InvocationEngine, ModelCatalog, configure_logging
from polygate.api import CHAT_COMPLETIONS_PATH, route
from polygate.llms import InvocationError


async def handle(path: str, raw: str) -> tuple[int, dict]:
    try:
        body = json.loads(raw)
    except ValueError as e:
        return 400, {"error": f"request body is not valid JSON: {e}"}

    try:
        async with InvocationEngine(ModelCatalog.builtin()) as engine:
            return 200, await route(engine, path, body)
    except InvocationError as e:
        return 400, {"error": str(e)}


def main() -> int:
    configure_logging()
    path = sys.argv[1] if len(sys.argv) > 1 else CHAT_COMPLETIONS_PATH
    status, payload = asyncio.run(handle(path, sys.stdin.read()))
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0 if status == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
