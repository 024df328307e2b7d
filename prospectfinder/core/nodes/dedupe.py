from __future__ import annotations

from typing import Iterable, List

from ...providers.base import BusinessRecord
from ..workflow_types import WorkflowContext


def identity_key(record: BusinessRecord) -> str:
    # Phone is compared verbatim; two businesses sharing name and phone collapse into one.
    return f"{record.business_name.lower()}-{record.phone}"


def dedupe_records(records: Iterable[BusinessRecord]) -> List[BusinessRecord]:
    """First occurrence of each identity key wins; input order is preserved."""
    seen = set()
    unique = []
    for r in records:
        key = identity_key(r)
        if key in seen:
            continue
        seen.add(key)
        unique.append(r)
    return unique


class CanonicalizeAndDedupeNode:
    name = "canonicalize_and_dedupe"

    async def run(self, ctx: WorkflowContext) -> WorkflowContext:
        ctx.records = dedupe_records(ctx.raw_records)[: ctx.query.requested_count]
        return ctx
