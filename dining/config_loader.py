"""
Load the caption extraction tables (`dining/rules.yaml`) with an optional override file.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).resolve().parent / "rules.yaml"

_SECTIONS = ("name_patterns", "name_prefixes", "cities", "regions", "cuisines")


def load_rules_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read the bundled rule tables, then overlay any section defined in ``path``.

    An override section replaces the bundled section wholesale so ordering
    stays fully under the override author's control.
    """
    data = _read_yaml(DEFAULT_RULES_PATH)
    if path is None:
        return data
    if not path.exists():
        logger.warning("Rules override not found at %s; using bundled rules.", path)
        return data
    override = _read_yaml(path)
    for section in _SECTIONS:
        if section in override:
            data[section] = override[section]
    unknown = set(override) - set(_SECTIONS)
    if unknown:
        logger.warning("Ignoring unknown rule sections in %s: %s", path, ", ".join(sorted(unknown)))
    return data


def _read_yaml(path: Path) -> Dict[str, Any]:
    raw = path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Rules file {path} must contain a mapping at the top level")
    return data
