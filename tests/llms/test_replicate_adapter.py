from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest

from polygate.llms.clients.adapters.replicate import ReplicateAdapter
from polygate.llms.config import GatewayConfig
from polygate.llms.errors import (
    InvocationTimeoutError,
    ProtocolError,
    TransportError,
    UpstreamError,
)
from polygate.llms.types import CapabilityDescriptor, ImageShape, Message, Provider


def run_async(coro):
    return asyncio.run(coro)


ENDPOINT = "https://api.replicate.com/v1/models/openai/gpt-4o/predictions"
POLL_URL = "https://api.replicate.com/v1/predictions/p1"
STREAM_URL = "https://stream.replicate.com/v1/files/p1"

GPT4O = CapabilityDescriptor(
    provider=Provider.REPLICATE,
    endpoint=ENDPOINT,
    roles_allowed=frozenset({"user", "assistant", "developer", "system"}),
    image_field_name="image_input",
    image_shape=ImageShape.LIST,
)

CLAUDE = CapabilityDescriptor(
    provider=Provider.REPLICATE,
    endpoint="https://api.replicate.com/v1/models/anthropic/claude-4-sonnet/predictions",
    control_name="extended_thinking",
    control_values_allowed=frozenset({"false", "true"}),
    roles_allowed=frozenset({"user", "assistant"}),
    image_field_name="image",
    image_shape=ImageShape.SINGLE,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


class Upstream:
    """Scripted Replicate: one creation reply, then a queue of poll replies."""

    def __init__(self, created, polls=(), stream=None, create_status=201):
        self.created = created
        self.polls = list(polls)
        self.stream = stream
        self.create_status = create_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            if isinstance(self.created, (bytes, str)):
                return httpx.Response(self.create_status, content=self.created)
            return httpx.Response(self.create_status, json=self.created)
        if str(request.url) == STREAM_URL:
            return self.stream(request)
        return httpx.Response(200, json=self.polls.pop(0))

    @property
    def gets(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]


def _invoke(upstream, messages, control_value=None, *, descriptor=GPT4O, clock=None, **cfg):
    clock = clock or FakeClock()
    config = GatewayConfig(replicate_api_token="r8_test", **cfg)

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as client:
            adapter = ReplicateAdapter(
                config=config,
                http_client=client,
                clock=clock,
                sleep=clock.sleep,
            )
            return await adapter.invoke(descriptor, messages, control_value)

    return run_async(_run())


def _created(**extra):
    body = {"id": "p1", "status": "starting", "urls": {"get": POLL_URL}}
    body.update(extra)
    return body


def test_immediate_output_skips_polling():
    upstream = Upstream({"id": "p1", "status": "succeeded", "output": ["Hel", "lo"]})
    assert _invoke(upstream, [Message(role="user", input_text="hi")]) == "Hello"
    assert upstream.gets == []


def test_create_body_for_single_message():
    upstream = Upstream({"id": "p1", "status": "succeeded", "output": "ok"})
    _invoke(upstream, [Message(role="user", input_text="hi")])

    create = upstream.requests[0]
    assert str(create.url) == ENDPOINT
    assert create.headers["Authorization"] == "Bearer r8_test"
    assert json.loads(create.content) == {"stream": False, "input": {"prompt": "hi"}}


def test_create_body_for_conversation_with_attachments():
    upstream = Upstream({"id": "p1", "status": "succeeded", "output": "ok"})
    _invoke(
        upstream,
        [
            Message(role="user", input_text="look", input_image="https://img/old.png"),
            Message(role="assistant", input_text="seen"),
            Message(role="user", input_text="and now", input_image="https://img/new.png", input_audio="a.wav"),
        ],
        "true",
        descriptor=CLAUDE,
    )

    assert json.loads(upstream.requests[0].content)["input"] == {
        "prompt": "and now",
        "messages": [
            {"role": "user", "content": "look"},
            {"role": "assistant", "content": "seen"},
            {"role": "user", "content": "and now"},
        ],
        "image": "https://img/new.png",
        "audio": "a.wav",
        "extended_thinking": True,
    }


def test_image_list_is_sent_under_descriptor_field():
    upstream = Upstream({"id": "p1", "status": "succeeded", "output": "ok"})
    _invoke(upstream, [Message(role="user", input_text="x", input_image=["a", "b"])])
    assert json.loads(upstream.requests[0].content)["input"]["image_input"] == ["a", "b"]


def test_polls_with_capped_exponential_backoff():
    processing = {"id": "p1", "status": "processing"}
    upstream = Upstream(
        _created(),
        polls=[processing] * 5 + [{"id": "p1", "status": "succeeded", "output": ["po", "ng"]}],
    )
    clock = FakeClock()

    assert _invoke(upstream, [Message(role="user", input_text="ping")], clock=clock) == "pong"
    assert clock.sleeps == pytest.approx([0.2, 0.4, 0.8, 1.6, 2.0])
    assert [str(r.url) for r in upstream.gets] == [POLL_URL] * 6
    assert upstream.gets[0].headers["Authorization"] == "Bearer r8_test"


def test_poll_timeout_abandons_job():
    processing = {"id": "p1", "status": "processing"}
    upstream = Upstream(_created(), polls=[processing] * 10)
    clock = FakeClock()

    with pytest.raises(InvocationTimeoutError):
        _invoke(
            upstream,
            [Message(role="user", input_text="ping")],
            clock=clock,
            poll_timeout_s=1.0,
            poll_initial_delay_s=0.25,
            poll_max_delay_s=2.0,
        )

    # Final sleep is trimmed to the remaining budget.
    assert clock.sleeps == [0.25, 0.5, 0.25]
    assert len(upstream.gets) == 3


def test_timeout_error_is_also_builtin_timeout():
    assert issubclass(InvocationTimeoutError, TimeoutError)


def test_poll_falls_back_to_prediction_id_url():
    upstream = Upstream(
        {"id": "p1", "status": "starting"},
        polls=[{"id": "p1", "status": "succeeded", "output": "done"}],
    )
    assert _invoke(upstream, [Message(role="user", input_text="x")]) == "done"
    assert str(upstream.gets[0].url) == POLL_URL


def test_succeeded_poll_with_null_output_is_logged(caplog):
    caplog.set_level(logging.WARNING, logger="polygate")
    upstream = Upstream(
        _created(),
        polls=[{"id": "p1", "status": "succeeded", "output": None}],
    )

    assert _invoke(upstream, [Message(role="user", input_text="x")]) == "null"
    assert any(
        "p1 succeeded with null output" in r.getMessage() and r.levelno == logging.WARNING
        for r in caplog.records
    )


def test_missing_id_and_poll_url_is_protocol_error():
    upstream = Upstream({"status": "starting"})
    with pytest.raises(ProtocolError):
        _invoke(upstream, [Message(role="user", input_text="x")])


def test_failed_prediction_raises_upstream_error():
    upstream = Upstream(
        _created(),
        polls=[{"id": "p1", "status": "failed", "error": "NSFW content detected"}],
    )
    with pytest.raises(UpstreamError) as exc:
        _invoke(upstream, [Message(role="user", input_text="x")])
    assert exc.value.status == "failed"
    assert "NSFW content detected" in exc.value.body


def test_canceled_at_creation_raises_upstream_error():
    upstream = Upstream({"id": "p1", "status": "canceled"})
    with pytest.raises(UpstreamError) as exc:
        _invoke(upstream, [Message(role="user", input_text="x")])
    assert exc.value.status == "canceled"


def test_rejected_creation_raises_upstream_error():
    upstream = Upstream({"detail": "Invalid version"}, create_status=422)
    with pytest.raises(UpstreamError) as exc:
        _invoke(upstream, [Message(role="user", input_text="x")])
    assert exc.value.status == 422
    assert "Invalid version" in exc.value.body


def test_creation_with_202_is_not_accepted():
    upstream = Upstream(_created(), create_status=202)
    with pytest.raises(UpstreamError) as exc:
        _invoke(upstream, [Message(role="user", input_text="x")])
    assert exc.value.status == 202


def test_malformed_creation_is_protocol_error():
    with pytest.raises(ProtocolError):
        _invoke(Upstream(["not", "an", "object"]), [Message(role="user", input_text="x")])
    with pytest.raises(ProtocolError):
        _invoke(Upstream(b"not json"), [Message(role="user", input_text="x")])


def _sse(*chunks: bytes):
    def respond(request: httpx.Request) -> httpx.Response:
        async def body():
            for chunk in chunks:
                yield chunk

        return httpx.Response(200, headers={"content-type": "text/event-stream"}, content=body())

    return respond


def test_streaming_accumulates_output_until_done():
    upstream = Upstream(
        _created(urls={"get": POLL_URL, "stream": STREAM_URL}),
        stream=_sse(
            b"event: output\ndata: Hel",
            b"lo\n\nevent: output\ndata: {}\n\n",
            b"data:  world\n\nevent: done\ndata: {}\n\n",
            b"event: output\ndata: ignored\n\n",
        ),
    )
    text = _invoke(upstream, [Message(role="user", input_text="x")], replicate_stream=True)

    assert text == "Hello world"
    assert json.loads(upstream.requests[0].content)["stream"] is True
    stream_request = upstream.gets[0]
    assert str(stream_request.url) == STREAM_URL
    assert stream_request.headers["Accept"] == "text/event-stream"
    assert stream_request.headers["Cache-Control"] == "no-store"
    assert stream_request.headers["Authorization"] == "Bearer r8_test"


def test_stream_error_event_raises_upstream_error():
    upstream = Upstream(
        _created(urls={"stream": STREAM_URL}),
        stream=_sse(b"event: output\ndata: partial\n\nevent: error\ndata: boom\n\n"),
    )
    with pytest.raises(UpstreamError) as exc:
        _invoke(upstream, [Message(role="user", input_text="x")], replicate_stream=True)
    assert exc.value.body == "boom"


def test_stream_closed_without_done_returns_accumulated_text(caplog):
    caplog.set_level(logging.WARNING, logger="polygate")
    upstream = Upstream(
        _created(urls={"stream": STREAM_URL}),
        stream=_sse(b"event: output\ndata: partial\n\n", b"event: output\ndata: trunc"),
    )
    text = _invoke(upstream, [Message(role="user", input_text="x")], replicate_stream=True)

    assert text == "partial"
    assert any("without a done event" in r.getMessage() for r in caplog.records)


def test_stream_non_200_raises_upstream_error():
    def refuse(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="stream expired")

    upstream = Upstream(_created(urls={"stream": STREAM_URL}), stream=refuse)
    with pytest.raises(UpstreamError) as exc:
        _invoke(upstream, [Message(role="user", input_text="x")], replicate_stream=True)
    assert exc.value.status == 404
    assert exc.value.body == "stream expired"


def test_stream_url_ignored_when_streaming_disabled():
    upstream = Upstream(
        _created(urls={"get": POLL_URL, "stream": STREAM_URL}),
        polls=[{"id": "p1", "status": "succeeded", "output": "polled"}],
    )
    assert _invoke(upstream, [Message(role="user", input_text="x")]) == "polled"
    assert [str(r.url) for r in upstream.gets] == [POLL_URL]


def test_poll_transport_failure_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(201, json=_created())
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(TransportError) as exc:
        _invoke(handler, [Message(role="user", input_text="x")])
    assert isinstance(exc.value.__cause__, httpx.ReadTimeout)
