"""
Caption classification: restaurant name, city and cuisine from free text.

Name resolution runs a fixed cascade (override table, ordered regex patterns,
named-entity recognizer, leading capitalized words). City and cuisine come
from ordered keyword tables and resolve independently of the name.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from dining.config_loader import load_rules_config
from dining.models import ExtractionResult

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 50
MAX_CAPITALIZED_WORDS = 3

ORG_LABELS = ("ORG",)
PLACE_LABELS = ("GPE", "LOC", "FAC")

_HASHTAG = re.compile(r"#\w+")
_URL = re.compile(r"https?://\S+")
_PUNCTUATION = re.compile(r"[^\w\s'-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")

NameTransform = Callable[[str], str]
EntityRecognizer = Callable[[str], List[Tuple[str, str]]]


def clean_caption(caption: str) -> str:
    cleaned = _HASHTAG.sub("", caption or "")
    cleaned = _URL.sub("", cleaned)
    cleaned = _PUNCTUATION.sub(" ", cleaned)
    return _WHITESPACE.sub(" ", cleaned).strip()


def make_name_transform(prefixes: Sequence[str]) -> NameTransform:
    prefix_re = None
    if prefixes:
        alternatives = "|".join(re.escape(p) for p in prefixes)
        prefix_re = re.compile(rf"^(?:{alternatives})\s+", re.IGNORECASE)

    def transform(raw: str) -> str:
        name = _WHITESPACE.sub(" ", raw.strip())
        if prefix_re is not None:
            name = prefix_re.sub("", name, count=1)
        return name

    return transform


@dataclass
class NamePattern:
    regex: re.Pattern[str]
    transform: NameTransform

    def apply(self, text: str) -> Optional[str]:
        match = self.regex.search(text)
        if not match or not match.group(1):
            return None
        candidate = self.transform(match.group(1))
        if MIN_NAME_LENGTH <= len(candidate) <= MAX_NAME_LENGTH:
            return candidate
        return None


@dataclass
class ExtractionRules:
    name_patterns: List[NamePattern] = field(default_factory=list)
    cities: List[Tuple[str, re.Pattern[str]]] = field(default_factory=list)
    cuisines: List[Tuple[str, List[str]]] = field(default_factory=list)
    regions: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ExtractionRules":
        transform = make_name_transform(config.get("name_prefixes") or [])
        patterns = [NamePattern(re.compile(raw), transform) for raw in config.get("name_patterns") or []]

        cities: List[Tuple[str, re.Pattern[str]]] = []
        for city, aliases in (config.get("cities") or {}).items():
            if isinstance(aliases, str):
                aliases = [aliases]
            alternatives = "|".join(re.escape(str(alias)) for alias in aliases or [city])
            cities.append((city, re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)))

        cuisines: List[Tuple[str, List[str]]] = []
        for cuisine, keywords in (config.get("cuisines") or {}).items():
            if isinstance(keywords, str):
                keywords = [keywords]
            cuisines.append((cuisine, [str(kw).lower() for kw in keywords or []]))

        regions = {str(city): str(region) for city, region in (config.get("regions") or {}).items()}
        return cls(name_patterns=patterns, cities=cities, cuisines=cuisines, regions=regions)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "ExtractionRules":
        return cls.from_config(load_rules_config(path))

    def region_for(self, city: str) -> str:
        return self.regions.get(city, "")


class SpacyEntityRecognizer:
    """
    Named-entity fallback backed by a spaCy pipeline, loaded on first use.

    A missing model disables the recognizer for the rest of the process; the
    extractor then falls through to its capitalized-word heuristic.
    """

    def __init__(self, model_name: str) -> None:
        self.model_name = model_name
        self._nlp = None
        self._unavailable = not model_name

    def __call__(self, text: str) -> List[Tuple[str, str]]:
        nlp = self._load()
        if nlp is None:
            return []
        return [(ent.text, ent.label_) for ent in nlp(text).ents]

    def _load(self):
        if self._nlp is None and not self._unavailable:
            import spacy

            try:
                self._nlp = spacy.load(self.model_name)
            except OSError as exc:
                logger.warning("spaCy model '%s' unavailable; NER fallback disabled (%s)", self.model_name, exc)
                self._unavailable = True
        return self._nlp


class EntityExtractor:
    def __init__(
        self,
        rules: Optional[ExtractionRules] = None,
        recognizer: Optional[EntityRecognizer] = None,
    ) -> None:
        self.rules = rules or ExtractionRules.load()
        self.recognizer = recognizer

    def extract(self, caption: str, video_id: str, overrides: Mapping[str, str]) -> ExtractionResult:
        caption = caption or ""
        return ExtractionResult(
            name=self.extract_name(caption, video_id, overrides),
            city=self.extract_city(caption),
            cuisine=self.extract_cuisine(caption),
        )

    def extract_name(self, caption: str, video_id: str, overrides: Mapping[str, str]) -> Optional[str]:
        override = overrides.get(video_id)
        if isinstance(override, str) and override.strip():
            return override.strip()

        cleaned = clean_caption(caption)
        for pattern in self.rules.name_patterns:
            name = pattern.apply(cleaned)
            if name:
                return name

        name = self._recognize(cleaned)
        if name:
            return name

        return _leading_capitalized(cleaned)

    def extract_city(self, caption: str) -> str:
        for city, pattern in self.rules.cities:
            if pattern.search(caption or ""):
                return city
        return ""

    def extract_cuisine(self, caption: str) -> str:
        lower = (caption or "").lower()
        for cuisine, keywords in self.rules.cuisines:
            if any(keyword in lower for keyword in keywords):
                return cuisine
        return ""

    def _recognize(self, cleaned: str) -> Optional[str]:
        if self.recognizer is None or not cleaned:
            return None
        try:
            entities = self.recognizer(cleaned)
        except Exception as exc:
            logger.warning("Entity recognizer failed: %s", exc)
            return None
        for labels in (ORG_LABELS, PLACE_LABELS):
            for text, label in entities:
                if label in labels and text.strip():
                    return text.strip()
        return None


def _leading_capitalized(cleaned: str) -> Optional[str]:
    words: List[str] = []
    for word in cleaned.split():
        if len(word) > 1 and word[0].isupper():
            words.append(word)
            if len(words) >= MAX_CAPITALIZED_WORDS:
                break
        elif words:
            break
    return " ".join(words) if words else None
