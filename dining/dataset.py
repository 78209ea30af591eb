"""
Read-side queries over the item list and restaurant registry.

Every accessor returns a freshly built sequence; nothing here mutates the
underlying documents.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from dining.models import Item, Restaurant, ReviewSnippet

RankingKey = Callable[[Item, Restaurant], float]


def has_google_data(restaurant: Restaurant) -> bool:
    return restaurant.google.rating > 0 and bool(restaurant.google.place_id)


def has_yelp_data(restaurant: Restaurant) -> bool:
    return restaurant.yelp.rating > 0


def google_reviews(restaurant: Restaurant) -> List[ReviewSnippet]:
    return [review for review in restaurant.reviews if review.source == "google"]


def combined_rating(restaurant: Restaurant) -> float:
    """Review-count weighted mean of the provider ratings that are present."""
    records = [r for r in (restaurant.google, restaurant.yelp) if r.rating > 0]
    if not records:
        return 0.0
    weights = [max(r.review_count, 1) for r in records]
    total = sum(r.rating * w for r, w in zip(records, weights))
    return round(total / sum(weights), 2)


RANKING_KEYS: Dict[str, RankingKey] = {
    "likes": lambda item, _restaurant: item.stats.likes,
    "comments": lambda item, _restaurant: item.stats.comments,
    "shares": lambda item, _restaurant: item.stats.shares,
    "rating": lambda _item, restaurant: combined_rating(restaurant),
}


class Dataset:
    def __init__(self, items: Sequence[Item], restaurants: Mapping[str, Restaurant]) -> None:
        self._items = items
        self._restaurants = restaurants

    def items(self) -> List[Item]:
        return list(self._items)

    def restaurants(self) -> Dict[str, Restaurant]:
        return dict(self._restaurants)

    def get_item(self, video_id: str) -> Optional[Item]:
        for item in self._items:
            if item.video_id == video_id:
                return item
        return None

    def get_restaurant(self, slug: str) -> Optional[Restaurant]:
        return self._restaurants.get(slug)

    def items_by_restaurant(self, slug: str) -> List[Item]:
        return [item for item in self._items if item.restaurant_slug == slug]

    def items_by_city(self, city: str) -> List[Item]:
        wanted = city.lower()
        return [item for item in self._items if item.city.lower() == wanted]

    def items_by_cuisine(self, cuisine: str) -> List[Item]:
        wanted = cuisine.lower()
        return [item for item in self._items if item.cuisine.lower() == wanted]

    def cities(self) -> List[str]:
        return sorted({item.city for item in self._items if item.city})

    def cuisines(self) -> List[str]:
        return sorted({item.cuisine for item in self._items if item.cuisine})

    def top(self, limit: int = 10, key: str | RankingKey = "likes") -> List[Tuple[Item, Restaurant]]:
        """Items paired with their restaurant, best first; ties keep list order."""
        rank = RANKING_KEYS[key] if isinstance(key, str) else key
        pairs = [
            (item, self._restaurants[item.restaurant_slug])
            for item in self._items
            if item.restaurant_slug in self._restaurants
        ]
        pairs.sort(key=lambda pair: rank(*pair), reverse=True)
        return pairs[:limit]

    def latest(self, limit: int = 10) -> List[Item]:
        return sorted(self._items, key=lambda item: item.create_time, reverse=True)[:limit]
