"""
Slug helpers used for registry keys and every derived site path.
"""
from __future__ import annotations

import re

from dining.models import Item

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")

ITEM_SLUG_CAPTION_LIMIT = 50
VIDEO_HOST_HANDLE = "oneminreviews"


def slugify(text: str) -> str:
    """Lowercase ``[a-z0-9-]`` identifier without leading, trailing or repeated dashes."""
    if not text:
        return ""
    slug = _DISALLOWED.sub("", text.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _DASHES.sub("-", slug)
    return slug.strip("-")


def item_slug(item: Item) -> str:
    caption_slug = slugify(item.caption)[:ITEM_SLUG_CAPTION_LIMIT]
    if caption_slug.endswith("-"):
        caption_slug = caption_slug[:-1]
    return f"{caption_slug}-{item.video_id}"


def _join(base_url: str, *segments: str) -> str:
    base = base_url if base_url.endswith("/") else f"{base_url}/"
    return base + "/".join(segments) + "/"


def item_path(item: Item, base_url: str = "/") -> str:
    return _join(base_url, item.restaurant_slug, item_slug(item))


def city_path(city: str, base_url: str = "/") -> str:
    return _join(base_url, "city", slugify(city))


def cuisine_path(cuisine: str, base_url: str = "/") -> str:
    return _join(base_url, "cuisine", slugify(cuisine))


def watch_url(video_id: str, handle: str = VIDEO_HOST_HANDLE) -> str:
    return f"https://www.tiktok.com/@{handle}/video/{video_id}"


def embed_url(video_id: str) -> str:
    return f"https://www.tiktok.com/embed/v2/{video_id}"


PLACEHOLDER_THUMBNAIL = "/assets/images/placeholder.svg"

_LOCAL_FRAME = re.compile(r"^/assets/images/(\d+)/")


def resolve_thumbnail(thumbnail_url: str) -> str:
    """
    Map a stored thumbnail to one the site can serve.

    Remote URLs pass through. Local per-item frames resolve to the item's
    shipped ``og.webp``; an empty value falls back to the placeholder.
    """
    if not thumbnail_url:
        return PLACEHOLDER_THUMBNAIL
    if thumbnail_url.startswith("http"):
        return thumbnail_url
    match = _LOCAL_FRAME.match(thumbnail_url)
    if match:
        return f"/assets/images/{match.group(1)}/og.webp"
    return thumbnail_url
