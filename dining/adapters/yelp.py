"""
Yelp Fusion business search lookup.
"""
from __future__ import annotations

import logging
from typing import Optional

from dining.http_client import HttpClient
from dining.models import ProviderResult, RatingRecord
from dining.rate_limiter import RateLimiter
from dining.security import is_configured_key

logger = logging.getLogger(__name__)


class YelpProvider:
    name = "yelp"

    search_url = "https://api.yelp.com/v3/businesses/search"

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

        payload = self.http.get(
            self.search_url,
            params={"term": name, "location": city, "limit": 1, "categories": "restaurants"},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        businesses = (payload or {}).get("businesses")
        if not businesses or not isinstance(businesses, list):
            logger.info("Yelp: no results for %r in %s", name, city)
            return None

        biz = businesses[0]
        try:
            rating = RatingRecord(
                rating=float(biz.get("rating") or 0),
                review_count=int(biz.get("review_count") or 0),
                url=biz.get("url") or None,
            )
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Yelp: malformed business payload for %r: %s", name, exc)
            return None

        self.rate_limiter.cooldown(self.name)
        return ProviderResult(rating=rating)
