from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List

from ..providers.base import BusinessRecord, SearchQuery
from .analysis import Lead
from .events import ProgressEvent, SearchEvent

Emit = Callable[[SearchEvent], Awaitable[None]]


async def _discard(event: SearchEvent) -> None:
    return None


@dataclass
class WorkflowContext:
    search_id: str
    query: SearchQuery
    emit: Emit = _discard

    raw_records: List[BusinessRecord] = field(default_factory=list)
    records: List[BusinessRecord] = field(default_factory=list)
    leads: List[Lead] = field(default_factory=list)

    provider_counts: Dict[str, int] = field(default_factory=dict)

    async def progress(self, message: str) -> None:
        await self.emit(ProgressEvent(message=message))
