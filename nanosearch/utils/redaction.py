"""Utilities for redacting credentials from provider error messages."""

from __future__ import annotations

import re
from typing import Iterable


class SecretRedactor:
    """Redact API keys and bearer tokens from text before it is logged or returned."""

    SECRET_PLACEHOLDER = "[REDACTED_SECRET]"

    _KV_SECRET_RE = re.compile(
        r'(?i)(["\']?(?:api[_-]?key|token|secret|authorization)["\']?\s*[:=]\s*["\']?)([^"\'\s,}\]]+)'
    )
    _BEARER_RE = re.compile(r"(?i)\bBearer\s+[A-Za-z0-9._~+/=\-]{8,}")
    _PPLX_KEY_RE = re.compile(r"\bpplx-[A-Za-z0-9._=\-]{8,}\b")

    def __init__(self, secrets: Iterable[str] | None = None):
        self._literal_secrets: set[str] = set()
        for raw in secrets or ():
            value = (raw or "").strip()
            if len(value) >= 6:
                self._literal_secrets.add(value)

    def redact(self, text: str) -> str:
        """Redact sensitive values from text."""
        if not text:
            return text

        sanitized = text
        for value in sorted(self._literal_secrets, key=len, reverse=True):
            sanitized = sanitized.replace(value, self.SECRET_PLACEHOLDER)

        sanitized = self._BEARER_RE.sub(f"Bearer {self.SECRET_PLACEHOLDER}", sanitized)
        sanitized = self._KV_SECRET_RE.sub(rf"\1{self.SECRET_PLACEHOLDER}", sanitized)
        sanitized = self._PPLX_KEY_RE.sub(self.SECRET_PLACEHOLDER, sanitized)
        return sanitized
