# Simulated discovery providers.
# prospectfinder/providers/simulated.py
from __future__ import annotations

import random
from typing import List, Optional
from urllib.parse import quote

from .base import BusinessRecord, SearchQuery, SocialMedia

_STREETS = ["Park", "Market", "Plaza", "Avenue"]


def _slug(category: str) -> str:
    return "".join(category.lower().split())


def _maps_url(query: SearchQuery) -> str:
    return "https://maps.google.com/?q=" + quote(f"{query.category} {query.city} {query.country}", safe="")


class _SimulatedProvider:
    """
    Base for the offline providers. Records are generated from the query so the
    whole pipeline can run without third-party credentials.
    Pass a seeded `rng` for reproducible output.
    """

    provider_name = "simulated"
    display_name = "Simulated source"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def _chance(self, threshold: float) -> bool:
        return self.rng.random() > threshold

    def _phone(self) -> str:
        return f"+{self.rng.randint(100000000, 999999999)}"

    async def fetch(self, query: SearchQuery, limit: int) -> List[BusinessRecord]:
        return [self._make(query, i) for i in range(max(0, limit))]

    def _make(self, query: SearchQuery, i: int) -> BusinessRecord:
        raise NotImplementedError


class SimulatedMapsProvider(_SimulatedProvider):
    provider_name = "maps"
    display_name = "Google Maps"

    def _make(self, query: SearchQuery, i: int) -> BusinessRecord:
        slug = _slug(query.category)
        return BusinessRecord(
            business_name=f"{query.category} {i + 1} - {query.city}",
            address=f"{self.rng.randint(1, 999)} Main Street, {query.location}",
            phone=self._phone(),
            email=f"contact{i}@{slug}{i}.com" if self._chance(0.5) else "",
            social_media=SocialMedia(
                facebook=f"https://facebook.com/{slug}{i}" if self._chance(0.3) else None,
                instagram=f"https://instagram.com/{slug}{i}" if self._chance(0.4) else None,
            ),
            website=f"https://{slug}{i}.com" if self._chance(0.4) else "",
            maps_url=_maps_url(query),
            category=query.category,
            source=self.provider_name,
        )


class SimulatedDirectoryProvider(_SimulatedProvider):
    provider_name = "directories"
    display_name = "local directories"

    def _make(self, query: SearchQuery, i: int) -> BusinessRecord:
        slug = _slug(query.category)
        n = i + 100
        has_website = self._chance(0.6)
        return BusinessRecord(
            business_name=f"{query.category} Business {n} - {query.city}",
            address=f"{self.rng.randint(1, 999)} {self.rng.choice(_STREETS)} Road, {query.location}",
            phone=self._phone(),
            email=f"info{i}@{slug}{n}.com" if self._chance(0.6) else "",
            social_media=SocialMedia(
                facebook=f"https://facebook.com/{slug}{n}" if self._chance(0.5) else None,
                instagram=f"https://instagram.com/{slug}{n}" if self._chance(0.6) else None,
            ),
            website=f"https://www.{slug}{n}.com" if has_website else "",
            maps_url=_maps_url(query),
            category=query.category,
            source=self.provider_name,
        )


class SimulatedSocialProvider(_SimulatedProvider):
    provider_name = "social"
    display_name = "social media platforms"

    def _make(self, query: SearchQuery, i: int) -> BusinessRecord:
        slug = _slug(query.category)
        n = i + 200
        has_website = self._chance(0.7)
        return BusinessRecord(
            business_name=f"{query.city} {query.category} {n}",
            address=query.location,
            phone=self._phone(),
            email=f"contact{n}@gmail.com" if self._chance(0.7) else "",
            social_media=SocialMedia(
                facebook=f"https://facebook.com/{slug}{n}",
                instagram=f"https://instagram.com/{slug}{n}" if self._chance(0.3) else None,
            ),
            website=f"https://{slug}{n}.com" if has_website else "",
            maps_url=_maps_url(query),
            category=query.category,
            source=self.provider_name,
        )
