from __future__ import annotations

import asyncio
import logging
import math
from typing import List, Sequence

from ...providers.base import BusinessRecord, SearchQuery, SourceProvider
from ..workflow_types import WorkflowContext

logger = logging.getLogger(__name__)


def per_provider_limit(requested_count: int, provider_count: int) -> int:
    if provider_count <= 0:
        return 0
    return math.ceil(requested_count / provider_count)


class DiscoverBusinessesNode:
    name = "discover_businesses"

    def __init__(self, providers: Sequence[SourceProvider], timeout_s: float = 60.0):
        self.providers = list(providers)
        self.timeout_s = timeout_s

    async def _fetch_one(self, provider: SourceProvider, query: SearchQuery, limit: int) -> List[BusinessRecord]:
        try:
            records = await asyncio.wait_for(provider.fetch(query, limit), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            logger.warning("provider %s timed out after %ss", provider.provider_name, self.timeout_s)
            return []
        except Exception as exc:  # noqa: BLE001
            logger.warning("provider %s failed: %s", provider.provider_name, exc)
            return []
        return list(records)[:limit]

    async def run(self, ctx: WorkflowContext) -> WorkflowContext:
        limit = per_provider_limit(ctx.query.requested_count, len(self.providers))

        for provider in self.providers:
            await ctx.progress(f"Searching {provider.display_name}...")

        batches = await asyncio.gather(
            *(self._fetch_one(p, ctx.query, limit) for p in self.providers)
        )

        raw: List[BusinessRecord] = []
        for provider, batch in zip(self.providers, batches):
            ctx.provider_counts[provider.provider_name] = len(batch)
            raw.extend(batch)

        logger.info("search %s: providers returned %s", ctx.search_id, ctx.provider_counts)
        ctx.raw_records = raw
        return ctx
