"""
High-level orchestration: fold caption extraction and provider lookups into the
restaurant registry and the item list.

Items are processed strictly one at a time. The enrichment gate reads the
registry state left behind by earlier items that share a restaurant key, and
provider calls must stay serial to honour their cooldowns.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, MutableMapping, Optional

from dining.adapters.base import ProviderRegistry, RatingProvider
from dining.adapters.google_places import GooglePlacesProvider
from dining.adapters.yelp import YelpProvider
from dining.extraction import EntityExtractor, ExtractionRules, SpacyEntityRecognizer
from dining.http_client import HttpClient
from dining.models import Item, ProviderHealth, ProviderResult, Restaurant, RunSummary
from dining.rate_limiter import RateLimiter
from dining.settings import DiningSettings
from dining.slugs import slugify

logger = logging.getLogger(__name__)


def build_providers(settings: DiningSettings, *, skip_api: bool = False) -> ProviderRegistry:
    """Build both rating providers; ``skip_api`` blanks credentials so neither touches the network."""
    http = HttpClient()
    limiter = RateLimiter()
    google_key = "" if skip_api else settings.google_places_key
    yelp_key = "" if skip_api else settings.yelp_api_key
    return ProviderRegistry(
        [
            GooglePlacesProvider(google_key, http=http, rate_limiter=limiter, rate_limit_seconds=settings.provider_delay),
            YelpProvider(yelp_key, http=http, rate_limiter=limiter, rate_limit_seconds=settings.provider_delay),
        ]
    )


class EnrichmentPipeline:
    def __init__(
        self,
        providers: Optional[ProviderRegistry] = None,
        extractor: Optional[EntityExtractor] = None,
    ) -> None:
        self.providers = providers or ProviderRegistry()
        self.extractor = extractor or EntityExtractor()
        self._health: Dict[str, ProviderHealth] = {}

    @classmethod
    def from_settings(cls, settings: DiningSettings, *, skip_api: bool = False) -> "EnrichmentPipeline":
        rules = ExtractionRules.load(settings.rules_path)
        recognizer = SpacyEntityRecognizer(settings.ner_model) if settings.ner_model else None
        return cls(
            providers=build_providers(settings, skip_api=skip_api),
            extractor=EntityExtractor(rules=rules, recognizer=recognizer),
        )

    @property
    def rules(self) -> ExtractionRules:
        return self.extractor.rules

    def run(
        self,
        items: List[Item],
        registry: MutableMapping[str, Restaurant],
        overrides: Mapping[str, str],
    ) -> RunSummary:
        """
        Classify and enrich ``items`` in place, upserting into ``registry``.

        A failure on one item is logged and counted; whatever that item had
        already written stays in place and the batch moves on.
        """
        self._health = {
            provider.name: ProviderHealth(name=provider.name, enabled=provider.enabled)
            for provider in self.providers.all()
        }
        if not self.providers.enabled():
            logger.info("No rating provider configured; running in extraction-only mode.")

        summary = RunSummary()
        for item in items:
            try:
                self._process(item, registry, overrides, summary)
            except Exception:
                summary.errored += 1
                logger.exception("%s: enrichment failed", item.video_id)

        summary.providers = list(self._health.values())
        if summary.needs_override:
            logger.warning(
                "%d item(s) need a manual override: %s",
                len(summary.needs_override),
                ", ".join(summary.needs_override),
            )
        logger.info(
            "Complete. Extracted: %d, enriched: %d, skipped: %d, errored: %d",
            summary.extracted,
            summary.enriched,
            summary.skipped,
            summary.errored,
        )
        return summary

    def _process(
        self,
        item: Item,
        registry: MutableMapping[str, Restaurant],
        overrides: Mapping[str, str],
        summary: RunSummary,
    ) -> None:
        if item.restaurant_slug and item.restaurant_slug in registry and item.city:
            logger.debug("%s: already enriched (%s)", item.video_id, item.restaurant_slug)
            resolved = registry[item.restaurant_slug]
            if item.video_id not in resolved.video_ids:
                resolved.video_ids.append(item.video_id)
            summary.skipped += 1
            return

        extraction = self.extractor.extract(item.caption, item.video_id, overrides)
        name = extraction.name
        slug = slugify(name) if name else ""
        if not slug:
            logger.info("%s: could not extract restaurant name from caption", item.video_id)
            summary.needs_override.append(item.video_id)
            return

        city = item.city or extraction.city
        cuisine = item.cuisine or extraction.cuisine
        item.restaurant_slug = slug
        item.city = city
        item.cuisine = cuisine
        summary.extracted += 1
        logger.info("%s: extracted %r (%s) - %s, %s", item.video_id, name, slug, city or "?", cuisine or "?")

        restaurant = registry.get(slug)
        if restaurant is None:
            restaurant = Restaurant(
                name=name,
                slug=slug,
                city=city,
                state=self.rules.region_for(city),
                cuisine=cuisine,
            )
            registry[slug] = restaurant
        else:
            if not restaurant.city and city:
                restaurant.city = city
                restaurant.state = restaurant.state or self.rules.region_for(city)
            if not restaurant.cuisine and cuisine:
                restaurant.cuisine = cuisine

        if item.video_id not in restaurant.video_ids:
            restaurant.video_ids.append(item.video_id)

        if city and self._enrich(restaurant, name, city):
            summary.enriched += 1

    def _enrich(self, restaurant: Restaurant, name: str, city: str) -> bool:
        enriched = False
        for provider in self.providers.enabled():
            record = getattr(restaurant, provider.name)
            if not record.needs_enrichment():
                continue
            health = self._health[provider.name]
            health.calls += 1
            result = provider.search(name, city)
            if result is None:
                health.misses += 1
                continue
            health.hits += 1
            apply_provider_result(restaurant, provider, result)
            enriched = True
            current = getattr(restaurant, provider.name)
            logger.info(
                "  %s: %s/5 (%d reviews)", provider.name, current.rating, current.review_count
            )
        return enriched


def apply_provider_result(restaurant: Restaurant, provider: RatingProvider, result: ProviderResult) -> None:
    """
    Patch only the fields ``provider`` owns, never overwriting populated values.

    An existing non-zero rating survives; only its missing identifier is
    filled in. Address and coordinates are written only while empty. New
    snippets from the provider replace its own older snippets and sit in
    front of snippets from every other source.
    """
    current = getattr(restaurant, provider.name)
    if current.rating == 0:
        setattr(restaurant, provider.name, result.rating)
    else:
        updates = {}
        if not current.place_id and result.rating.place_id:
            updates["place_id"] = result.rating.place_id
        if not current.url and result.rating.url:
            updates["url"] = result.rating.url
        if updates:
            setattr(restaurant, provider.name, current.model_copy(update=updates))

    if not restaurant.address and result.address:
        restaurant.address = result.address
    if not restaurant.lat and result.lat:
        restaurant.lat = result.lat
    if not restaurant.lng and result.lng:
        restaurant.lng = result.lng

    if result.reviews:
        kept = [review for review in restaurant.reviews if review.source != provider.name]
        restaurant.reviews = list(result.reviews) + kept
