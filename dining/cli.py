"""
Command line entry points for ingestion, enrichment and status.
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from dining import load_dataset, run_enrichment
from dining.ingestion import merge_items
from dining.models import Item
from dining.settings import DiningSettings, load_settings
from dining.status import build_status, summary_to_dict
from dining.storage import DataStore, StorageError

logger = logging.getLogger(__name__)


def _settings(data_dir: Optional[str]) -> DiningSettings:
    settings = load_settings()
    if data_dir:
        settings.data_dir = Path(data_dir)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    return settings


@click.group()
def cli():
    pass


@cli.command()
@click.option("--data-dir", default=None, help="Directory holding videos.json / restaurants.json / overrides.json")
@click.option("--dry-run", is_flag=True, help="Run the pipeline without writing any document.")
@click.option("--skip-api", is_flag=True, help="Do not call the rating providers.")
def enrich(data_dir: Optional[str], dry_run: bool, skip_api: bool):
    settings = _settings(data_dir)
    logger.info("Google Places API: %s", "configured" if settings.google_enabled and not skip_api else "not configured")
    logger.info("Yelp Fusion API: %s", "configured" if settings.yelp_enabled and not skip_api else "not configured")
    try:
        summary, _dataset = run_enrichment(settings, dry_run=dry_run, skip_api=skip_api)
    except (StorageError, OSError) as exc:
        logger.error("Fatal error: %s", exc)
        sys.exit(1)
    click.echo(json.dumps(summary_to_dict(summary), indent=2))


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--data-dir", default=None)
def ingest(source: Path, data_dir: Optional[str]):
    settings = _settings(data_dir)
    store = DataStore(settings.data_dir)
    try:
        existing = store.load_items() if store.items_path.exists() else []
        raw = json.loads(source.read_text(encoding="utf-8"))
        incoming = [Item.model_validate(entry) for entry in raw]
    except (StorageError, ValueError, TypeError) as exc:
        logger.error("Fatal error: %s", exc)
        sys.exit(1)
    counts = merge_items(existing, incoming)
    try:
        store.save_items(existing)
    except OSError as exc:
        logger.error("Fatal error: %s", exc)
        sys.exit(1)
    click.echo(json.dumps(counts))


@cli.command()
@click.option("--data-dir", default=None)
def status(data_dir: Optional[str]):
    settings = _settings(data_dir)
    try:
        dataset = load_dataset(settings)
    except StorageError as exc:
        logger.error("Fatal error: %s", exc)
        sys.exit(1)
    click.echo(json.dumps(build_status(dataset, settings), indent=2))


if __name__ == "__main__":  # pragma: no cover
    cli()
