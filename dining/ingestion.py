"""
Merge freshly scraped item records into the persisted item list.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from dining.models import Item

logger = logging.getLogger(__name__)


def _is_remote(url: str) -> bool:
    return url.startswith("http")


def merge_items(existing: List[Item], incoming: Iterable[Item]) -> Dict[str, int]:
    """
    Append unknown identifiers and refresh known ones in place.

    Known items only take new engagement counters, plus the incoming
    thumbnail when it is remote and the stored one is a local path. The
    classification triple is never touched.
    """
    by_id = {item.video_id: item for item in existing}
    added = updated = 0
    for item in incoming:
        current = by_id.get(item.video_id)
        if current is None:
            existing.append(item)
            by_id[item.video_id] = item
            added += 1
            logger.info("New item: %s - %s", item.video_id, item.caption[:60])
            continue
        current.stats = item.stats.model_copy()
        if _is_remote(item.thumbnail_url) and not _is_remote(current.thumbnail_url):
            current.thumbnail_url = item.thumbnail_url
        updated += 1
    logger.info("Ingestion complete. Added %d new, updated %d existing. Total: %d", added, updated, len(existing))
    return {"added": added, "updated": updated}
