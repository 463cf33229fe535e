# core/streaming.py
import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Final, List, Optional, Sequence
from uuid import uuid4
from config.settings import settings
from core.evidence_search import MAX_EVIDENCE, search_evidence
from core.query_parser import parse_query
from core.response_validator import validate_response
from core.result_generator import generate_results
from core.timeout_guard import with_timeout
from model.events import PipelineEvent
from model.scholarship import GenerationPayload, ScholarshipResult
from model.search import EvidenceItem, ParametersDraft, SearchParameters
from util.enums import PipelineEventType, StreamState
from util.errors import (
    GenerationFormatError,
    ParseError,
    StageTimeoutError,
    classify,
)
from util.functions import chunked
from util.timing import timed
from util.types import GenerateFn, SearchFn

logger = logging.getLogger(__name__)

_CLOSE: Final[object] = object()


class EventChannel:
    """
    Bounded queue between the pipeline task and the response body.
    `send` waits while the consumer is behind; `close` is idempotent.
    """

    def __init__(self, maxsize: int = 8) -> None:
        self._queue: "asyncio.Queue[object]" = asyncio.Queue(maxsize=max(1, maxsize))
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, event: PipelineEvent) -> None:
        if self._closed:
            raise RuntimeError("event channel is closed")
        await self._queue.put(event)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_CLOSE)

    def abandon(self) -> None:
        # Consumer is gone; mark closed without waking anyone.
        self._closed = True

    async def __aiter__(self) -> AsyncIterator[PipelineEvent]:
        while True:
            item = await self._queue.get()
            if item is _CLOSE:
                return
            yield item  # type: ignore[misc]


@dataclass(frozen=True)
class StreamConfig:
    parse_timeout_ms: int = settings.PARSE_TIMEOUT_MS
    search_timeout_ms: int = settings.SEARCH_TIMEOUT_MS
    generate_timeout_ms: int = settings.GENERATE_TIMEOUT_MS
    batch_size: int = settings.STREAM_BATCH_SIZE
    batch_delay_ms: int = settings.STREAM_BATCH_DELAY_MS
    queue_size: int = settings.STREAM_QUEUE_SIZE


def _event(kind: PipelineEventType, data: object = None) -> PipelineEvent:
    return PipelineEvent(type=kind, data=data)


class StreamDispatcher:
    """
    Drives parse -> search -> generate+validate and delivers the validated
    payload as an ordered sequence of PipelineEvents.

    Parsing and clarification are synchronous (out-of-band) calls; the event
    stream starts from a complete parameter set.
    """

    def __init__(
        self,
        *,
        generate: Optional[GenerateFn] = None,
        parse_generate: Optional[GenerateFn] = None,
        search: Optional[SearchFn] = None,
        config: Optional[StreamConfig] = None,
    ) -> None:
        self._generate = generate
        self._parse_generate = parse_generate
        self._search = search
        self._config = config or StreamConfig()

    # ---------------- Out-of-band stages ----------------

    async def parse(self, query: str) -> ParametersDraft:
        """Parse stage; the draft's `next_state` says whether clarification is pending."""
        logger.debug("pipeline.state state=%s", StreamState.PARSING.value)
        draft = await with_timeout(
            parse_query(query, generate=self._parse_generate),
            self._config.parse_timeout_ms,
            stage="parse",
        )
        logger.info("pipeline.parse.done next=%s", draft.next_state.value)
        return draft

    async def search(self, params: SearchParameters) -> List[EvidenceItem]:
        """Evidence search; a timeout degrades to no evidence."""
        try:
            return await with_timeout(
                search_evidence(params, search=self._search),
                self._config.search_timeout_ms,
                stage="search",
            )
        except StageTimeoutError:
            logger.warning("pipeline.search.timeout evidence=0")
            return []

    async def generate(
        self, params: SearchParameters, evidence: Sequence[EvidenceItem]
    ) -> GenerationPayload:
        """Generate then validate, both under one deadline."""
        return await with_timeout(
            self._generate_and_validate(params, evidence),
            self._config.generate_timeout_ms,
            stage="generate",
        )

    async def _generate_and_validate(
        self, params: SearchParameters, evidence: Sequence[EvidenceItem]
    ) -> GenerationPayload:
        raw = await generate_results(params, evidence, generate=self._generate)
        result = validate_response(raw)
        if not result.isValid or result.data is None:
            raise GenerationFormatError("Failed to parse AI response")
        return result.data

    # ---------------- Event stream ----------------

    async def events(
        self,
        params: SearchParameters,
        evidence: Optional[Sequence[EvidenceItem]] = None,
    ) -> AsyncIterator[PipelineEvent]:
        """
        Yield the event sequence for one request. `evidence=None` runs the
        search stage inside the stream.
        """
        channel = EventChannel(self._config.queue_size)
        producer = asyncio.create_task(self._run(channel, params, evidence))
        try:
            async for event in channel:
                yield event
        finally:
            if not producer.done():
                producer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await producer

    async def stream(
        self,
        params: SearchParameters,
        evidence: Optional[Sequence[EvidenceItem]] = None,
    ) -> AsyncIterator[bytes]:
        async for event in self.events(params, evidence):
            yield event.encode()

    async def _run(
        self,
        channel: EventChannel,
        params: SearchParameters,
        evidence: Optional[Sequence[EvidenceItem]],
    ) -> None:
        rid = uuid4().hex[:8]
        state = StreamState.CONNECTING

        def enter(next_state: StreamState) -> None:
            nonlocal state
            state = next_state
            logger.debug("stream.state req=%s state=%s", rid, state.value)

        logger.info("stream.start req=%s evidence=%s", rid, "given" if evidence is not None else "search")
        try:
            with timed(logger, "stream.pipeline", req=rid):
                await channel.send(_event(PipelineEventType.CONNECT, {"status": "connected"}))

                missing = params.missing_fields()
                if missing:
                    raise ParseError("Missing required parameters: " + ", ".join(missing))
                await channel.send(_event(PipelineEventType.STATUS, {"status": "processing"}))

                if evidence is None:
                    enter(StreamState.SEARCHING)
                    evidence = await self.search(params)
                else:
                    evidence = list(evidence)[:MAX_EVIDENCE]

                enter(StreamState.GENERATING)
                payload = await self.generate(params, evidence)

                enter(StreamState.EMITTING_SUMMARY)
                await channel.send(_event(PipelineEventType.SUMMARY, payload.summary))

                enter(StreamState.EMITTING_SCHOLARSHIPS)
                await self._emit_scholarships(channel, payload.scholarships)

                enter(StreamState.EMITTING_EXTRAS)
                await self._emit_extras(channel, payload)

                await channel.send(_event(PipelineEventType.COMPLETE, {"status": "complete"}))
                enter(StreamState.COMPLETE)
        except asyncio.CancelledError:
            logger.info("stream.cancelled req=%s state=%s", rid, state.value)
            channel.abandon()
            raise
        except Exception as e:
            err = classify(e)
            if isinstance(err, StageTimeoutError):
                enter(StreamState.TIMED_OUT)
                event = _event(PipelineEventType.TIMEOUT, {"status": "timeout", "message": err.message})
            else:
                enter(StreamState.ERRORED)
                event = _event(PipelineEventType.ERROR, {"status": "error", "message": err.message})
            logger.error("stream.failed req=%s kind=%s", rid, err.kind)
            await channel.send(event)
        finally:
            await channel.close()
            logger.info("stream.done req=%s state=%s", rid, state.value)

    async def _emit_scholarships(
        self, channel: EventChannel, scholarships: Sequence[ScholarshipResult]
    ) -> None:
        for i, batch in enumerate(chunked(scholarships, self._config.batch_size)):
            if i:
                await self._pace()
            await asyncio.gather(
                *(
                    channel.send(_event(PipelineEventType.SCHOLARSHIP, s.model_dump(exclude_none=True)))
                    for s in batch
                )
            )

    async def _pace(self) -> None:
        # Best-effort spacing between batches; 0 disables.
        delay = max(0, self._config.batch_delay_ms) / 1000
        if delay:
            await asyncio.sleep(delay)

    async def _emit_extras(self, channel: EventChannel, payload: GenerationPayload) -> None:
        sends = []
        if payload.recommendations:
            sends.append(channel.send(_event(PipelineEventType.RECOMMENDATIONS, payload.recommendations)))
        if payload.additionalResources:
            resources = [r.model_dump() for r in payload.additionalResources]
            sends.append(channel.send(_event(PipelineEventType.RESOURCES, resources)))
        if sends:
            await asyncio.gather(*sends)
