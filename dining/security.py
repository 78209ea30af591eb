from __future__ import annotations

import re

_QUERY_SECRET = re.compile(r"(?i)\b(key|api[_-]?key|token)=([^&\s]+)")
_BEARER = re.compile(r"(?i)Bearer\s+[A-Za-z0-9._\-]+")


def redact_secrets(text: str) -> str:
    """Mask provider credentials (``key=`` query params, bearer tokens) in log text."""
    if not isinstance(text, str):
        return text
    redacted = _QUERY_SECRET.sub(r"\1=***REDACTED***", text)
    return _BEARER.sub("Bearer ***REDACTED***", redacted)


def is_configured_key(value: str | None) -> bool:
    """Return True if a credential is set and is not a ``YOUR_...`` placeholder."""
    if not value or not value.strip():
        return False
    return "YOUR_" not in value and "your_" not in value
