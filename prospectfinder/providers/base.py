# Provider interfaces and dataclasses.
# prospectfinder/providers/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol

MAX_LEAD_COUNT = 100


@dataclass(frozen=True)
class SearchQuery:
    """A location/category query handed to every discovery provider."""
    city: str
    country: str
    category: str
    requested_count: int
    state: str = ""

    def __post_init__(self) -> None:
        for name in ("city", "country", "category"):
            if not str(getattr(self, name) or "").strip():
                raise ValueError(f"SearchQuery.{name} is required")
        if not 1 <= int(self.requested_count) <= MAX_LEAD_COUNT:
            raise ValueError(f"SearchQuery.requested_count must be between 1 and {MAX_LEAD_COUNT}")

    @property
    def location(self) -> str:
        parts = [self.city, self.state, self.country]
        return ", ".join(p for p in parts if p)


@dataclass(frozen=True)
class SocialMedia:
    facebook: Optional[str] = None
    instagram: Optional[str] = None


@dataclass(frozen=True)
class BusinessRecord:
    """
    A raw, unscored candidate returned by a discovery provider.
    An empty `website` means no website is known for the business.
    """
    business_name: str
    address: str
    phone: str
    email: str = ""
    social_media: SocialMedia = field(default_factory=SocialMedia)
    website: str = ""
    maps_url: str = ""
    category: str = ""
    source: str = ""


class SourceProvider(Protocol):
    provider_name: str
    display_name: str

    async def fetch(self, query: SearchQuery, limit: int) -> List[BusinessRecord]:
        """
        Returns up to `limit` records, in the provider's own ranking order.
        """
        ...
