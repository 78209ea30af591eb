"""
Status payload for a dataset and the last pipeline run.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from dining.dataset import Dataset, has_google_data, has_yelp_data
from dining.models import ProviderHealth, RunSummary
from dining.settings import DiningSettings


def _health_to_dict(status: ProviderHealth) -> Dict[str, Any]:
    return {
        "name": status.name,
        "enabled": status.enabled,
        "calls": status.calls,
        "hits": status.hits,
        "misses": status.misses,
    }


def summary_to_dict(summary: RunSummary) -> Dict[str, Any]:
    return {
        "counts": summary.counts(),
        "needs_override": list(summary.needs_override),
        "providers": [_health_to_dict(entry) for entry in summary.providers],
    }


def build_status(dataset: Dataset, settings: DiningSettings, summary: Optional[RunSummary] = None) -> Dict[str, Any]:
    items = dataset.items()
    restaurants = dataset.restaurants()
    unclassified = [item.video_id for item in items if not item.restaurant_slug]
    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "dataset": {
            "items": len(items),
            "classified_items": len(items) - len(unclassified),
            "unclassified_items": unclassified,
            "restaurants": len(restaurants),
            "with_google_data": sum(1 for r in restaurants.values() if has_google_data(r)),
            "with_yelp_data": sum(1 for r in restaurants.values() if has_yelp_data(r)),
            "cities": dataset.cities(),
            "cuisines": dataset.cuisines(),
        },
        "config": {
            "data_dir": str(settings.data_dir),
            "google_places": "configured" if settings.google_enabled else "not configured",
            "yelp": "configured" if settings.yelp_enabled else "not configured",
            "provider_delay": settings.provider_delay,
            "ner_model": settings.ner_model or None,
        },
        "last_run": summary_to_dict(summary) if summary else None,
    }
