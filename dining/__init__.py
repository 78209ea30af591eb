"""
Public API for the restaurant enrichment pipeline.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from dining.dataset import Dataset
from dining.merge import EnrichmentPipeline
from dining.models import RunSummary
from dining.settings import DiningSettings, load_settings
from dining.storage import DataStore

logger = logging.getLogger(__name__)


def run_enrichment(
    settings: Optional[DiningSettings] = None,
    *,
    dry_run: bool = False,
    skip_api: bool = False,
    pipeline: Optional[EnrichmentPipeline] = None,
) -> Tuple[RunSummary, Dataset]:
    """
    Load every document, enrich in memory, then rewrite the item list and registry.

    Storage errors raised while loading abort before anything is mutated.
    """
    settings = settings or load_settings()
    store = DataStore(settings.data_dir)
    items = store.load_items()
    registry = store.load_restaurants()
    overrides = store.load_overrides()

    pipeline = pipeline or EnrichmentPipeline.from_settings(settings, skip_api=skip_api)
    summary = pipeline.run(items, registry, overrides)

    if dry_run:
        logger.info("Dry run: no files written")
    else:
        # registry first: items must never reference a key missing on disk
        store.save_restaurants(registry)
        store.save_items(items)
        logger.info("Saved %d items and %d restaurants", len(items), len(registry))
    return summary, Dataset(items, registry)


def load_dataset(settings: Optional[DiningSettings] = None) -> Dataset:
    settings = settings or load_settings()
    store = DataStore(settings.data_dir)
    return Dataset(store.load_items(), store.load_restaurants())
