"""
Centralised settings for the enrichment pipeline (env-first, code-light).

Credentials and paths come from the environment; a local ``.env`` file is
honoured so running the pipeline by hand stays ergonomic.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from dining.security import is_configured_key

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_DELAY = 0.2
DEFAULT_NER_MODEL = "en_core_web_sm"


@dataclass
class DiningSettings:
    data_dir: Path
    google_places_key: str
    yelp_api_key: str
    provider_delay: float
    rules_path: Optional[Path]
    ner_model: str
    base_url: str
    log_level: str

    @property
    def google_enabled(self) -> bool:
        return is_configured_key(self.google_places_key)

    @property
    def yelp_enabled(self) -> bool:
        return is_configured_key(self.yelp_api_key)


def _float_from_env(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = float(raw)
        return value if value >= 0 else default
    except ValueError:
        logger.warning("Invalid float value for %s=%s; using default %s", key, raw, default)
        return default


def load_settings(dotenv: bool = True) -> DiningSettings:
    if dotenv:
        load_dotenv(os.getenv("DINING_DOTENV", ".env"))
    rules_env = os.getenv("DINING_RULES_PATH")
    return DiningSettings(
        data_dir=Path(os.getenv("DINING_DATA_DIR") or "data"),
        google_places_key=os.getenv("GOOGLE_PLACES_KEY", ""),
        yelp_api_key=os.getenv("YELP_API_KEY", ""),
        provider_delay=_float_from_env("DINING_PROVIDER_DELAY", DEFAULT_PROVIDER_DELAY),
        rules_path=Path(rules_env) if rules_env else None,
        ner_model=os.getenv("DINING_NER_MODEL", DEFAULT_NER_MODEL),
        base_url=os.getenv("DINING_BASE_URL") or "/",
        log_level=(os.getenv("DINING_LOG_LEVEL") or "INFO").upper(),
    )
