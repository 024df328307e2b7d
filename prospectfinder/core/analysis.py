from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from ..providers.base import BusinessRecord

NO_ISSUES = "No major issues detected"


class WebsiteStatus(str, Enum):
    NO_WEBSITE = "No Website"
    LOW_QUALITY = "Low Quality"
    GOOD_QUALITY = "Good Quality"


@dataclass(frozen=True)
class WebsiteAnalysis:
    status: WebsiteStatus
    score: int
    issues: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "score", max(0, min(100, int(self.score))))
        object.__setattr__(self, "issues", tuple(self.issues) or (NO_ISSUES,))


@dataclass(frozen=True)
class Lead:
    """A discovered business paired with the analysis of its website."""
    record: BusinessRecord
    analysis: WebsiteAnalysis

    def to_dict(self) -> Dict[str, Any]:
        r = self.record
        return {
            "businessName": r.business_name,
            "address": r.address,
            "phone": r.phone,
            "email": r.email,
            "socialMedia": {
                "facebook": r.social_media.facebook,
                "instagram": r.social_media.instagram,
            },
            "website": r.website,
            "mapsUrl": r.maps_url,
            "category": r.category,
            "source": r.source,
            "websiteStatus": self.analysis.status.value,
            "qualityScore": self.analysis.score,
            "issues": list(self.analysis.issues),
        }
