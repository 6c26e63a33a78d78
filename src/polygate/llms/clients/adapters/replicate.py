from __future__ import annotations

"""
Replicate adapter: create a prediction, then either stream it over
Server-Sent Events or poll it until a terminal status.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from ..base.adapter import ProviderAdapter
from ..shared.normalization import normalize_response, to_json_text
from ..shared.sse import EventStreamParser
from ...config import GatewayConfig
from ...errors import (
    InvocationTimeoutError,
    ProtocolError,
    TransportError,
    UpstreamError,
)
from ...types import (
    CapabilityDescriptor,
    InvocationJob,
    JobStatus,
    Message,
    NamedField,
    PredictionInput,
    PredictionRequest,
    Provider,
)
from ...utils import backoff_delay, clamp_str

logger = logging.getLogger(__name__)

_CREATE_ACCEPTED = (200, 201)
_TEXT_EVENTS = (None, "", "output", "message")
_ERROR_EVENT = "error"


class PredictionURLs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    stream: str | None = None
    get: str | None = None
    cancel: str | None = None


class PredictionResponse(BaseModel):
    """Subset of a Replicate prediction object the adapter relies on."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    status: str | None = None
    output: Any = None
    error: Any = None
    urls: PredictionURLs | None = None

    def to_job(self) -> InvocationJob:
        urls = self.urls or PredictionURLs()
        return InvocationJob(
            id=self.id,
            status=JobStatus.from_upstream(self.status),
            output=self.output,
            stream_url=urls.stream,
            poll_url=urls.get,
            cancel_url=urls.cancel,
        )


def _parse_prediction(body: Any) -> PredictionResponse:
    try:
        return PredictionResponse.model_validate(body)
    except ValidationError as e:
        raise ProtocolError(
            f"Malformed prediction object: {clamp_str(to_json_text(body), 500)}"
        ) from e


def _last_with(messages: Sequence[Message], attr: str) -> Message | None:
    for message in reversed(messages):
        if getattr(message, attr) is not None:
            return message
    return None


class ReplicateAdapter(ProviderAdapter):
    """Create-and-poll (or create-and-stream) adapter."""

    provider = Provider.REPLICATE

    def __init__(
        self,
        *,
        config: GatewayConfig,
        http_client: httpx.AsyncClient,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(config=config, http_client=http_client)
        self._clock = clock
        self._sleep = sleep

    def build_request(
        self,
        descriptor: CapabilityDescriptor,
        messages: Sequence[Message],
        control_value: str | None = None,
    ) -> PredictionRequest:
        last = messages[-1]
        history = None
        if len(messages) > 1:
            history = [{"role": m.role, "content": m.input_text} for m in messages]

        image = None
        image_source = _last_with(messages, "input_image")
        if image_source is not None and descriptor.image_field_name is not None:
            value = image_source.input_image
            image = NamedField(
                descriptor.image_field_name,
                list(value) if isinstance(value, list) else value,
            )

        audio = None
        audio_source = _last_with(messages, "input_audio")
        if audio_source is not None:
            audio = NamedField(descriptor.audio_field_name, audio_source.input_audio)

        video = None
        video_source = _last_with(messages, "input_video")
        if video_source is not None:
            video = NamedField(descriptor.video_field_name, video_source.input_video)

        return PredictionRequest(
            input=PredictionInput(
                prompt=last.input_text,
                messages=history,
                control=self._control_field(descriptor, control_value),
                image=image,
                audio=audio,
                video=video,
            ),
            stream=self.config.replicate_stream,
        )

    async def invoke(
        self,
        descriptor: CapabilityDescriptor,
        messages: Sequence[Message],
        control_value: str | None = None,
    ) -> str:
        request = self.build_request(descriptor, messages, control_value)
        body = await self._post_json(
            descriptor.endpoint,
            request.to_payload(),
            accepted=_CREATE_ACCEPTED,
        )
        job = _parse_prediction(body).to_job()
        logger.debug("prediction %s created with status %s", job.id, job.status.value)

        if job.status in (JobStatus.FAILED, JobStatus.CANCELED):
            raise UpstreamError(job.status.value, to_json_text(body))

        if job.output is not None:
            return normalize_response(job.output)

        if self.config.replicate_stream and job.stream_url:
            return await self._stream(job)

        return await self._poll(job)

    def _poll_url(self, job: InvocationJob) -> str:
        if job.poll_url:
            return job.poll_url
        if job.id:
            return f"{self.config.replicate_base_url.rstrip('/')}/predictions/{job.id}"
        raise ProtocolError("Prediction has neither a polling URL nor an id")

    async def _poll(self, job: InvocationJob) -> str:
        url = self._poll_url(job)
        deadline = self._clock() + self.config.poll_timeout_s
        attempt = 0

        while True:
            remaining = deadline - self._clock()
            if remaining <= 0:
                logger.warning(
                    "prediction %s abandoned after %.1fs in status %s",
                    job.id,
                    self.config.poll_timeout_s,
                    job.status.value,
                )
                raise InvocationTimeoutError(
                    f"Prediction {job.id or '?'} did not finish within "
                    f"{self.config.poll_timeout_s}s"
                )

            body = await self._get_json(url)
            prediction = _parse_prediction(body)
            job.advance(JobStatus.from_upstream(prediction.status))

            if job.status is JobStatus.SUCCEEDED:
                job.output = prediction.output
                if prediction.output is None:
                    logger.warning("prediction %s succeeded with null output", job.id)
                return normalize_response(prediction.output)
            if job.status in (JobStatus.FAILED, JobStatus.CANCELED):
                raise UpstreamError(job.status.value, to_json_text(body))

            delay = backoff_delay(
                attempt,
                self.config.poll_initial_delay_s,
                self.config.poll_max_delay_s,
            )
            attempt += 1
            await self._sleep(min(delay, max(deadline - self._clock(), 0.0)))

    async def _stream(self, job: InvocationJob) -> str:
        assert job.stream_url is not None
        headers = {
            **self._auth_headers(),
            "Accept": "text/event-stream",
            "Cache-Control": "no-store",
        }
        parser = EventStreamParser()
        chunks: list[str] = []

        try:
            async with self._http.stream("GET", job.stream_url, headers=headers) as response:
                if response.status_code != 200:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise UpstreamError(response.status_code, body)

                job.advance(JobStatus.PROCESSING)
                async for chunk in response.aiter_bytes():
                    for event in parser.feed(chunk):
                        if event.is_done:
                            job.advance(JobStatus.SUCCEEDED)
                            return "".join(chunks)
                        if event.event == _ERROR_EVENT:
                            job.advance(JobStatus.FAILED)
                            raise UpstreamError(_ERROR_EVENT, event.data)
                        if event.event in _TEXT_EVENTS and not event.is_placeholder:
                            chunks.append(event.data)
        except httpx.HTTPError as e:
            raise TransportError(f"Stream for prediction {job.id or '?'} failed: {e}") from e

        logger.warning(
            "stream for prediction %s closed without a done event; "
            "returning %d accumulated chunk(s)",
            job.id,
            len(chunks),
        )
        return "".join(chunks)
