"""
HTTP helper with retries + polite headers reused by rating providers.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from dining.security import redact_secrets

logger = logging.getLogger(__name__)


class HttpClient:
    def __init__(self, timeout: int = 15, max_retries: int = 3, user_agent: str | None = None):
        self.timeout = timeout
        self.session = requests.Session()
        retry = Retry(
            total=max_retries,
            backoff_factor=0.6,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update(
            {
                "User-Agent": user_agent or "DiningEnrichment/1.0",
                "Accept": "application/json",
            }
        )

    def get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Return the decoded JSON object, or None on non-2xx, transport or decode errors."""
        try:
            resp = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("HTTP GET exception %s", redact_secrets(str(exc)))
            return None
        if not 200 <= resp.status_code < 300:
            logger.warning("HTTP GET failed %s %s", resp.status_code, redact_secrets(resp.text[:200]))
            return None
        try:
            payload = resp.json()
        except ValueError:
            logger.warning("HTTP GET returned non-JSON body from %s", redact_secrets(resp.url or url))
            return None
        if not isinstance(payload, dict):
            logger.warning("HTTP GET returned unexpected JSON type %s", type(payload).__name__)
            return None
        return payload
