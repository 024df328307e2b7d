"""
Website quality analysis.

A candidate's home page is fetched once and reduced to a 0-100 score, a
status and a list of human readable issues. Scoring starts at 100 and every
failed check subtracts a fixed penalty; checks are independent of each other,
only the order of the issue list depends on the order they run in.
"""
from __future__ import annotations

import asyncio
import logging
import re
import socket
from typing import List, Optional

import httpx
from bs4 import BeautifulSoup

from .analysis import WebsiteAnalysis, WebsiteStatus
from .config import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

GOOD_QUALITY_THRESHOLD = 70
LARGE_PAGE_BYTES = 500_000
MAX_TABLES = 10
LINK_SAMPLE_SIZE = 10
MAX_PLACEHOLDER_LINKS = 3

SOCIAL_DOMAINS = ("facebook.com", "instagram.com", "twitter.com", "linkedin.com")
PLACEHOLDER_HREFS = {"", "#", "javascript:void(0)", "javascript:void(0);", "javascript:;"}

PHONE_RE = re.compile(r"(\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
EMAIL_RE = re.compile(r"[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}")


def _meta_content(soup: BeautifulSoup, name: str) -> str:
    tag = soup.find("meta", attrs={"name": name})
    return (tag.get("content") or "") if tag is not None else ""


HEAD_ONLY_TAGS = ["head", "title", "meta", "link", "base", "script", "style"]


def _body_text(soup: BeautifulSoup, html: str) -> str:
    if soup.body is not None:
        return soup.body.get_text()
    # No <body> tag: body content is whatever sits outside head-level elements.
    rest = BeautifulSoup(html, "html.parser")
    for name in HEAD_ONLY_TAGS:
        for tag in rest.find_all(name):
            tag.decompose()
    return rest.get_text()


def score_page(url: str, html: str, body_size: Optional[int] = None) -> WebsiteAnalysis:
    """
    Runs the fixed checks against fetched markup. `body_size` is the raw
    response size in bytes; it defaults to the encoded length of `html`.
    """
    soup = BeautifulSoup(html, "html.parser")
    if body_size is None:
        body_size = len(html.encode("utf-8"))

    issues: List[str] = []
    score = 100

    if not _meta_content(soup, "viewport"):
        issues.append("Not mobile-responsive")
        score -= 15

    if not url.startswith("https://"):
        issues.append("No HTTPS")
        score -= 10

    title = "".join(t.get_text() for t in soup.find_all("title"))
    if len(title) < 10:
        issues.append("Missing or poor title tag")
        score -= 10

    if len(_meta_content(soup, "description")) < 50:
        issues.append("Missing or poor meta description")
        score -= 10

    images = soup.find_all("img")
    if images:
        missing_alt = sum(1 for img in images if not img.get("alt"))
        if missing_alt / len(images) > 0.5:
            issues.append("Many images missing alt text")
            score -= 8

    body_text = _body_text(soup, html).lower()
    if not PHONE_RE.search(body_text) and not EMAIL_RE.search(body_text):
        issues.append("No contact information visible")
        score -= 15

    plugins = soup.find_all(["object", "embed"])
    if any("flash" in (tag.get("type") or "") for tag in plugins):
        issues.append("Uses outdated Flash technology")
        score -= 20

    if len(soup.find_all("table")) > MAX_TABLES:
        issues.append("Outdated table-based layout")
        score -= 15

    links = soup.find_all("a", href=True)
    if not any(domain in a["href"] for a in links for domain in SOCIAL_DOMAINS):
        issues.append("No social media integration")
        score -= 5

    if body_size > LARGE_PAGE_BYTES:
        issues.append("Large page size (slow loading)")
        score -= 10

    placeholders = sum(1 for a in links[:LINK_SAMPLE_SIZE] if a["href"].strip() in PLACEHOLDER_HREFS)
    if placeholders > MAX_PLACEHOLDER_LINKS:
        issues.append("Multiple broken links detected")
        score -= 8

    score = max(0, min(100, score))
    # Anything below the threshold is low quality; "No Website" only comes from a failed fetch.
    status = WebsiteStatus.GOOD_QUALITY if score >= GOOD_QUALITY_THRESHOLD else WebsiteStatus.LOW_QUALITY
    return WebsiteAnalysis(status=status, score=score, issues=tuple(issues))


def _is_unreachable(exc: BaseException) -> bool:
    """True when the failure means the site does not exist (DNS) or refuses connections."""
    seen = set()
    cur: Optional[BaseException] = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        if isinstance(cur, (socket.gaierror, ConnectionRefusedError)):
            return True
        cur = cur.__cause__ or cur.__context__
    return False


def no_website() -> WebsiteAnalysis:
    return WebsiteAnalysis(status=WebsiteStatus.NO_WEBSITE, score=0, issues=("No website found",))


def unreachable() -> WebsiteAnalysis:
    return WebsiteAnalysis(
        status=WebsiteStatus.NO_WEBSITE,
        score=0,
        issues=("Website not accessible or does not exist",),
    )


def http_error(status_code: int) -> WebsiteAnalysis:
    return WebsiteAnalysis(
        status=WebsiteStatus.LOW_QUALITY,
        score=20,
        issues=("Website not accessible", f"HTTP {status_code}"),
    )


def analysis_failed(detail: str) -> WebsiteAnalysis:
    return WebsiteAnalysis(
        status=WebsiteStatus.LOW_QUALITY,
        score=15,
        issues=("Unable to analyze website", detail or "Unknown error"),
    )


class WebsiteAnalyzer:
    """
    Fetches a site with a bounded timeout and scores it.

    Use as `async with WebsiteAnalyzer() as analyzer:` to share one connection
    pool across a search, or pass a `client`. Without either, each call opens
    a short-lived client.
    """

    def __init__(
        self,
        timeout_s: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout_s = timeout_s
        self.user_agent = user_agent
        self._client = client
        self._owns_client = False

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout_s,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
        )

    async def __aenter__(self):
        if self._client is None:
            self._client = self._new_client()
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    async def analyze(self, url: str) -> WebsiteAnalysis:
        if not url:
            return no_website()
        if self._client is not None:
            return await self._analyze(self._client, url)
        async with self._new_client() as client:
            return await self._analyze(client, url)

    async def _analyze(self, client: httpx.AsyncClient, url: str) -> WebsiteAnalysis:
        try:
            # httpx timeouts are per network operation; this bounds the whole fetch.
            resp = await asyncio.wait_for(
                client.get(url, headers={"User-Agent": self.user_agent}),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError:
            logger.info("website fetch timed out: %s", url)
            return analysis_failed(f"timeout of {int(self.timeout_s * 1000)}ms exceeded")
        except httpx.ConnectError as exc:
            logger.info("website unreachable: %s (%s)", url, exc)
            if _is_unreachable(exc):
                return unreachable()
            return analysis_failed(str(exc))
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.info("website fetch failed: %s (%s)", url, exc)
            return analysis_failed(str(exc) or exc.__class__.__name__)
        except Exception as exc:  # noqa: BLE001
            # malformed hostnames raise UnicodeError from idna
            logger.info("website fetch errored: %s (%r)", url, exc)
            return analysis_failed(str(exc) or exc.__class__.__name__)

        if resp.status_code >= 500:
            return analysis_failed(f"Request failed with status code {resp.status_code}")
        if resp.status_code >= 400:
            return http_error(resp.status_code)
        return await asyncio.to_thread(score_page, url, resp.text, len(resp.content))
