"""
Google Places lookup: find-place by text, then place details for reviews.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dining.http_client import HttpClient
from dining.models import ProviderResult, RatingRecord, ReviewSnippet
from dining.rate_limiter import RateLimiter
from dining.security import is_configured_key

logger = logging.getLogger(__name__)

MAX_REVIEWS = 5
MAX_REVIEW_CHARS = 300


class GooglePlacesProvider:
    name = "google"

    find_url = "https://maps.googleapis.com/maps/api/place/findplacefromtext/json"
    details_url = "https://maps.googleapis.com/maps/api/place/details/json"

    def __init__(
        self,
        api_key: Optional[str],
        http: Optional[HttpClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
        rate_limit_seconds: float = 0.2,
    ) -> None:
        self.api_key = api_key or ""
        self.enabled = is_configured_key(self.api_key)
        self.http = http or HttpClient()
        self.rate_limiter = rate_limiter or RateLimiter()
        self.rate_limiter.configure(self.name, rate_limit_seconds)

    def search(self, name: str, city: str) -> Optional[ProviderResult]:
        if not self.enabled:
            return None

        query = f"{name} restaurant {city}"
        found = self.http.get(
            self.find_url,
            params={
                "input": query,
                "inputtype": "textquery",
                "fields": "place_id,name,formatted_address,geometry,rating,user_ratings_total",
                "key": self.api_key,
            },
        )
        if not found or found.get("status") != "OK" or not found.get("candidates"):
            logger.info("Google Places: no results for %r", query)
            return None

        try:
            place_id = found["candidates"][0]["place_id"]
        except (KeyError, IndexError, TypeError):
            logger.warning("Google Places: malformed candidate payload for %r", query)
            return None

        details = self.http.get(
            self.details_url,
            params={
                "place_id": place_id,
                "fields": "name,rating,user_ratings_total,formatted_address,geometry,reviews",
                "key": self.api_key,
            },
        )
        if not details or details.get("status") != "OK":
            logger.info("Google Places: details unavailable for %s", place_id)
            return None

        try:
            result = _to_result(place_id, details.get("result") or {})
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Google Places: malformed details payload for %s: %s", place_id, exc)
            return None

        self.rate_limiter.cooldown(self.name)
        return result


def _to_result(place_id: str, detail: Dict[str, Any]) -> ProviderResult:
    if not isinstance(detail, dict):
        raise TypeError(f"expected an object for result, got {type(detail).__name__}")
    geometry = detail.get("geometry")
    location = geometry.get("location") if isinstance(geometry, dict) else None
    if not isinstance(location, dict):
        location = {}
    return ProviderResult(
        rating=RatingRecord(
            rating=float(detail.get("rating") or 0),
            review_count=int(detail.get("user_ratings_total") or 0),
            place_id=place_id,
        ),
        address=detail.get("formatted_address") or "",
        lat=float(location.get("lat") or 0),
        lng=float(location.get("lng") or 0),
        reviews=_to_reviews(detail.get("reviews") or []),
    )


def _to_reviews(raw_reviews: List[Dict[str, Any]]) -> List[ReviewSnippet]:
    reviews: List[ReviewSnippet] = []
    if not isinstance(raw_reviews, list):
        return reviews
    for raw in [r for r in raw_reviews if isinstance(r, dict)][:MAX_REVIEWS]:
        reviews.append(
            ReviewSnippet(
                source=GooglePlacesProvider.name,
                author=raw.get("author_name") or "",
                rating=float(raw.get("rating") or 0),
                text=(raw.get("text") or "")[:MAX_REVIEW_CHARS],
                date=_review_date(raw.get("time")),
            )
        )
    return reviews


def _review_date(epoch: Any) -> str:
    if not epoch:
        return ""
    return datetime.fromtimestamp(int(epoch), tz=timezone.utc).date().isoformat()
