from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import List, Optional

from ..providers.base import MAX_LEAD_COUNT, SearchQuery

# Offered to the UI; searches are not validated against this list.
BUSINESS_CATEGORIES = [
    "Restaurant",
    "Salon",
    "Gym",
    "Boutique",
    "Coaching Classes",
    "Cafe",
    "Spa",
    "Dental Clinic",
    "Law Firm",
    "Real Estate",
    "Auto Repair",
    "Pet Store",
    "Bakery",
    "Florist",
    "Plumber",
    "Electrician",
]


class SearchRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    city: str = Field(min_length=1)
    state: Optional[str] = None
    country: str = Field(min_length=1)
    category: str = Field(min_length=1)
    lead_count: int = Field(
        default=10,
        ge=1,
        le=MAX_LEAD_COUNT,
        validation_alias=AliasChoices("leadCount", "lead_count"),
    )

    def to_query(self) -> SearchQuery:
        return SearchQuery(
            city=self.city,
            state=self.state or "",
            country=self.country,
            category=self.category,
            requested_count=self.lead_count,
        )


class CategoriesResponse(BaseModel):
    categories: List[str]


class HealthResponse(BaseModel):
    status: str
    version: str
