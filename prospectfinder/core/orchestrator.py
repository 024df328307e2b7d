from __future__ import annotations

import asyncio
import contextlib
import logging
import uuid
from typing import AsyncIterator, Optional, Sequence

from ..providers.base import SearchQuery, SourceProvider
from ..providers.roster import build_default_providers
from .analyzer import WebsiteAnalyzer
from .config import Settings, settings as default_settings
from .events import CompleteEvent, ErrorEvent, SearchEvent
from .nodes.analyze import AnalyzeWebsitesNode
from .nodes.dedupe import CanonicalizeAndDedupeNode
from .nodes.discover import DiscoverBusinessesNode
from .workflow import WorkflowRunner
from .workflow_types import WorkflowContext

logger = logging.getLogger(__name__)


class SearchOrchestrator:
    """
    Runs one search and exposes it as an ordered stream of events.

    The workflow runs in a producer task that writes to a bounded queue; the
    stream ends with exactly one CompleteEvent or ErrorEvent. Closing the
    stream early cancels the producer along with any in-flight fetch.
    """

    def __init__(
        self,
        providers: Sequence[SourceProvider],
        analyzer,
        *,
        deadline_s: float = 300.0,
        result_delay_s: float = 0.1,
        provider_timeout_s: float = 60.0,
        event_buffer: int = 16,
    ):
        self.providers = list(providers)
        self.analyzer = analyzer
        self.deadline_s = deadline_s
        self.result_delay_s = result_delay_s
        self.provider_timeout_s = provider_timeout_s
        self.event_buffer = event_buffer

    @classmethod
    def from_settings(cls, cfg: Optional[Settings] = None) -> "SearchOrchestrator":
        cfg = cfg or default_settings
        return cls(
            build_default_providers(cfg),
            WebsiteAnalyzer(timeout_s=cfg.analyzer_timeout_s, user_agent=cfg.analyzer_user_agent),
            deadline_s=cfg.search_deadline_s,
            result_delay_s=cfg.result_delay_s,
            provider_timeout_s=cfg.provider_timeout_s,
            event_buffer=cfg.event_buffer,
        )

    def _runner(self) -> WorkflowRunner:
        return WorkflowRunner(
            nodes=[
                DiscoverBusinessesNode(self.providers, timeout_s=self.provider_timeout_s),
                CanonicalizeAndDedupeNode(),
                AnalyzeWebsitesNode(self.analyzer, delay_s=self.result_delay_s),
            ]
        )

    async def _run(self, ctx: WorkflowContext) -> WorkflowContext:
        async with contextlib.AsyncExitStack() as stack:
            # Providers and the analyzer may hold connection pools for the search.
            for resource in [*self.providers, self.analyzer]:
                if hasattr(resource, "__aenter__"):
                    await stack.enter_async_context(resource)
            return await self._runner().run(ctx)

    async def _produce(self, ctx: WorkflowContext) -> None:
        await ctx.progress("Starting business search...")
        loop = asyncio.get_running_loop()
        started = loop.time()
        try:
            await asyncio.wait_for(self._run(ctx), timeout=self.deadline_s)
        except asyncio.TimeoutError:
            if loop.time() - started < self.deadline_s:
                # raised by a provider or analyzer, not the search deadline
                logger.exception("search %s failed", ctx.search_id)
                await ctx.emit(ErrorEvent())
                return
            logger.warning("search %s exceeded deadline of %ss", ctx.search_id, self.deadline_s)
            await ctx.emit(ErrorEvent(message=f"Search timed out after {self.deadline_s:g} seconds"))
            return
        except Exception:
            logger.exception("search %s failed", ctx.search_id)
            await ctx.emit(ErrorEvent())
            return
        await ctx.emit(CompleteEvent())

    async def stream(self, query: SearchQuery, search_id: Optional[str] = None) -> AsyncIterator[SearchEvent]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=max(1, self.event_buffer))
        ctx = WorkflowContext(search_id=search_id or str(uuid.uuid4()), query=query, emit=queue.put)
        logger.info("search %s started: %s", ctx.search_id, query)

        producer = asyncio.create_task(self._produce(ctx))
        try:
            while True:
                get = asyncio.ensure_future(queue.get())
                done, _ = await asyncio.wait({get, producer}, return_when=asyncio.FIRST_COMPLETED)
                if get not in done:
                    get.cancel()
                    # The producer ended without a terminal event; drain anything left, then fail.
                    while not queue.empty():
                        event = queue.get_nowait()
                        yield event
                        if event.is_terminal:
                            return
                    if not producer.cancelled() and producer.exception() is not None:
                        logger.error("search %s producer crashed", ctx.search_id, exc_info=producer.exception())
                    yield ErrorEvent()
                    return
                event = get.result()
                yield event
                if event.is_terminal:
                    return
        finally:
            if not producer.done():
                producer.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await producer
            logger.info("search %s closed", ctx.search_id)
