# Google Places discovery provider.
# prospectfinder/providers/google_places.py
from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx

from .base import BusinessRecord, SearchQuery

logger = logging.getLogger(__name__)


def _safe_get(d: Dict[str, Any], path: List[str], default=None):
    cur: Any = d
    for key in path:
        if not isinstance(cur, dict) or key not in cur:
            return default
        cur = cur[key]
    return cur


@dataclass(frozen=True)
class GooglePlacesConfig:
    api_key: str
    # e.g. "en" or "en-CA"
    language_code: str = "en"
    # e.g. "CA" to bias results; None leaves it to the text query
    region_code: Optional[str] = None

    # Hard caps / safety
    timeout_s: float = 20.0
    max_retries: int = 4
    base_backoff_s: float = 0.6
    # Places API returns at most 20 results per page
    page_size: int = 20

    # Field masks
    # Keep these lean to reduce billing/latency.
    search_field_mask: str = "places.id,nextPageToken"
    details_field_mask: str = (
        "id,"
        "displayName.text,"
        "formattedAddress,"
        "nationalPhoneNumber,"
        "websiteUri,"
        "googleMapsUri"
    )


class GooglePlacesProvider:
    """
    Google Places API v1 provider:
      - POST https://places.googleapis.com/v1/places:searchText
      - GET  https://places.googleapis.com/v1/places/{place_id}

    Auth header:
      - X-Goog-Api-Key: <key>

    Field masks:
      - X-Goog-FieldMask: <comma-separated fields>
    """

    provider_name = "google_places"
    display_name = "Google Maps"
    _BASE_URL = "https://places.googleapis.com/v1"

    def __init__(self, cfg: GooglePlacesConfig, client: Optional[httpx.AsyncClient] = None):
        if not cfg.api_key:
            raise ValueError("GooglePlacesConfig.api_key is required")
        self.cfg = cfg
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.cfg.timeout_s)
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("GooglePlacesProvider must be used with 'async with' or provide a client.")
        return self._client

    async def _request_with_retries(
        self,
        method: str,
        url: str,
        *,
        headers: Dict[str, str],
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Retries on transient failures (429/5xx/timeouts) with exponential backoff + jitter.
        """
        last_err: Optional[Exception] = None
        for attempt in range(self.cfg.max_retries + 1):
            try:
                resp = await self.client.request(method, url, headers=headers, json=json)
                if resp.status_code in (429, 500, 502, 503, 504):
                    # transient / quota / backend issues
                    raise httpx.HTTPStatusError(
                        f"transient status {resp.status_code}",
                        request=resp.request,
                        response=resp,
                    )
                resp.raise_for_status()
                data = resp.json()
                if not isinstance(data, dict):
                    raise ValueError("Expected JSON object response")
                return data
            except (httpx.TimeoutException, httpx.NetworkError, httpx.HTTPStatusError, ValueError) as e:
                last_err = e
                if attempt >= self.cfg.max_retries:
                    break
                # Exponential backoff with jitter
                backoff = self.cfg.base_backoff_s * (2 ** attempt)
                jitter = random.random() * 0.25
                logger.debug("google places retry %d after %s", attempt + 1, e)
                await asyncio.sleep(backoff + jitter)
        raise RuntimeError(f"Google Places request failed after retries: {last_err}") from last_err

    def _headers(self, field_mask: str) -> Dict[str, str]:
        return {
            "X-Goog-Api-Key": self.cfg.api_key,
            "X-Goog-FieldMask": field_mask,
            "Content-Type": "application/json",
        }

    async def fetch(self, query: SearchQuery, limit: int) -> List[BusinessRecord]:
        """
        Pages through searchText until `limit` place ids are collected, then
        fetches details (phone + website + maps link) for each of them.
        """
        text_query = f"{query.category} in {query.location}"
        place_ids: List[str] = []
        token: Optional[str] = None
        while len(place_ids) < limit:
            batch, token = await self._search_page(text_query, page_token=token)
            place_ids.extend(pid for pid in batch if pid not in place_ids)
            if not token:
                break

        records: List[BusinessRecord] = []
        for place_id in place_ids[:limit]:
            details = await self._get_place_details(place_id)
            records.append(self._to_record(details, query))
        return records

    async def _search_page(self, text_query: str, *, page_token: Optional[str] = None) -> Tuple[List[str], Optional[str]]:
        body: Dict[str, Any] = {
            "textQuery": text_query,
            "languageCode": self.cfg.language_code,
            "pageSize": self.cfg.page_size,
        }
        if self.cfg.region_code:
            body["regionCode"] = self.cfg.region_code
        # Places API uses "pageToken" for pagination
        if page_token:
            body["pageToken"] = page_token

        data = await self._request_with_retries(
            "POST",
            f"{self._BASE_URL}/places:searchText",
            headers=self._headers(self.cfg.search_field_mask),
            json=body,
        )
        ids = [str(p["id"]) for p in data.get("places", []) or [] if p.get("id")]
        next_token = data.get("nextPageToken")
        return ids, (str(next_token) if next_token else None)

    async def _get_place_details(self, place_id: str) -> Dict[str, Any]:
        url = f"{self._BASE_URL}/places/{place_id}"
        return await self._request_with_retries(
            "GET",
            url,
            headers=self._headers(self.cfg.details_field_mask),
        )

    def _to_record(self, details: Dict[str, Any], query: SearchQuery) -> BusinessRecord:
        return BusinessRecord(
            business_name=_safe_get(details, ["displayName", "text"], "") or "",
            address=details.get("formattedAddress") or "",
            phone=details.get("nationalPhoneNumber") or "",
            website=details.get("websiteUri") or "",
            maps_url=details.get("googleMapsUri") or "",
            category=query.category,
            source=self.provider_name,
        )
