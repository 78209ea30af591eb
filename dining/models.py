"""
Core data structures shared by the enrichment pipeline.

Persisted documents (item list, restaurant registry) are pydantic models that
serialise with the camelCase keys the site renderer reads. Run-time records
that never hit disk are plain dataclasses.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Document(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        validate_assignment=True,
    )

    def to_dict(self) -> Dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ItemStats(_Document):
    likes: int = 0
    comments: int = 0
    shares: int = 0


class Item(_Document):
    """One short-form video and the classification assigned to it."""

    video_id: str
    caption: str = ""
    create_time: int = 0
    thumbnail_url: str = ""
    embed_url: str = ""
    restaurant_slug: str = ""
    city: str = ""
    cuisine: str = ""
    stats: ItemStats = Field(default_factory=ItemStats)


class RatingRecord(_Document):
    rating: float = 0.0
    review_count: int = 0
    place_id: Optional[str] = None
    url: Optional[str] = None

    @property
    def identifier(self) -> Optional[str]:
        return self.place_id or self.url

    @property
    def is_absent(self) -> bool:
        return self.rating == 0 and self.review_count == 0

    def needs_enrichment(self) -> bool:
        return not self.identifier or self.rating == 0


class ReviewSnippet(_Document):
    source: str
    author: str = ""
    rating: float = 0.0
    text: str = ""
    date: str = ""


class Restaurant(_Document):
    name: str
    slug: str
    city: str = ""
    state: str = ""
    cuisine: str = ""
    address: str = ""
    lat: float = 0.0
    lng: float = 0.0
    google: RatingRecord = Field(default_factory=RatingRecord)
    yelp: RatingRecord = Field(default_factory=RatingRecord)
    reviews: List[ReviewSnippet] = Field(default_factory=list)
    video_ids: List[str] = Field(default_factory=list)


RestaurantRegistry = Dict[str, Restaurant]


@dataclass
class ExtractionResult:
    name: Optional[str]
    city: str = ""
    cuisine: str = ""


@dataclass
class ProviderResult:
    """Normalized lookup result handed back by a rating provider."""

    rating: RatingRecord
    address: str = ""
    lat: float = 0.0
    lng: float = 0.0
    reviews: List[ReviewSnippet] = field(default_factory=list)


@dataclass
class ProviderHealth:
    name: str
    enabled: bool
    calls: int = 0
    hits: int = 0
    misses: int = 0


@dataclass
class RunSummary:
    extracted: int = 0
    enriched: int = 0
    skipped: int = 0
    errored: int = 0
    needs_override: List[str] = field(default_factory=list)
    providers: List[ProviderHealth] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {
            "extracted": self.extracted,
            "enriched": self.enriched,
            "skipped": self.skipped,
            "errored": self.errored,
            "needs_override": len(self.needs_override),
        }
