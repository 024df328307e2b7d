import asyncio
from typing import Dict, List, Optional

import pytest

from prospectfinder.core.analysis import WebsiteAnalysis, WebsiteStatus
from prospectfinder.core.analyzer import no_website
from prospectfinder.providers.base import BusinessRecord, SearchQuery


def make_record(name: str, phone: str = "+100000000", website: str = "", source: str = "test") -> BusinessRecord:
    return BusinessRecord(
        business_name=name,
        address="1 Main Street, Springfield, USA",
        phone=phone,
        website=website,
        maps_url="https://maps.google.com/?q=test",
        category="Cafe",
        source=source,
    )


class FakeProvider:
    def __init__(
        self,
        name: str,
        records: Optional[List[BusinessRecord]] = None,
        *,
        error: Optional[Exception] = None,
        delay_s: float = 0.0,
    ):
        self.provider_name = name
        self.display_name = name
        self.records = records or []
        self.error = error
        self.delay_s = delay_s
        self.limits: List[int] = []

    async def fetch(self, query: SearchQuery, limit: int) -> List[BusinessRecord]:
        self.limits.append(limit)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        return self.records[:limit]


class FakeAnalyzer:
    def __init__(self, failures: Optional[Dict[str, Exception]] = None):
        self.failures = failures or {}
        self.calls: List[str] = []

    async def analyze(self, url: str) -> WebsiteAnalysis:
        self.calls.append(url)
        if url in self.failures:
            raise self.failures[url]
        if not url:
            return no_website()
        return WebsiteAnalysis(status=WebsiteStatus.GOOD_QUALITY, score=90, issues=())


@pytest.fixture
def query():
    return SearchQuery(city="Springfield", state="IL", country="USA", category="Cafe", requested_count=5)
