from __future__ import annotations

import asyncio
import logging

from ..analysis import Lead
from ..events import ResultEvent
from ..workflow_types import WorkflowContext

logger = logging.getLogger(__name__)


class AnalyzeWebsitesNode:
    """Analyzes records one at a time, in order, emitting a result per lead."""

    name = "analyze_websites"

    def __init__(self, analyzer, delay_s: float = 0.1):
        self.analyzer = analyzer
        self.delay_s = delay_s

    async def run(self, ctx: WorkflowContext) -> WorkflowContext:
        total = len(ctx.records)
        await ctx.progress(f"Found {total} businesses. Analyzing websites...")

        for i, record in enumerate(ctx.records, start=1):
            await ctx.progress(f"Analyzing {record.business_name} ({i}/{total})")
            analysis = await self.analyzer.analyze(record.website)
            lead = Lead(record=record, analysis=analysis)
            ctx.leads.append(lead)
            await ctx.emit(ResultEvent.for_lead(lead))
            if self.delay_s > 0:
                await asyncio.sleep(self.delay_s)

        logger.info("search %s: analyzed %d leads", ctx.search_id, len(ctx.leads))
        return ctx
