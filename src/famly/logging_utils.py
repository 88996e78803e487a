"""Logging setup for Famly: plain or JSON output, with credentials masked."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Iterable, Tuple

REDACTED = "[redacted]"

# Each pattern keeps group 1 (the label) and masks group 2 (the value).
_CREDENTIAL_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"(Bearer\s+)([A-Za-z0-9\-._~+/=]+)", re.IGNORECASE),
    re.compile(r"(apikey[=:]\s*)([^&\s,'\"]+)", re.IGNORECASE),
    re.compile(
        r"""(["']?(?:access_token|refresh_token|password)["']?\s*[:=]\s*["']?)([^"'&\s,}]+)""",
        re.IGNORECASE,
    ),
)

_CONTEXT_FIELDS = ("request_id", "family_id")
_NOISY_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx")


class SensitiveDataFilter(logging.Filter):
    """Masks session tokens, the anon key and passwords before a record is emitted."""

    def __init__(self, secrets: Iterable[str]):
        super().__init__()
        self._secrets = tuple(sorted({s.strip() for s in secrets if s and s.strip()}, key=len, reverse=True))

    def redact(self, text: str) -> str:
        for pattern in _CREDENTIAL_PATTERNS:
            text = pattern.sub(lambda match: match.group(1) + REDACTED, text)
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        rendered = record.getMessage()
        masked = self.redact(rendered)
        if masked != rendered:
            record.msg, record.args = masked, ()
        for name in _CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if isinstance(value, str):
                setattr(record, name, self.redact(value))
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line; request and family ids are included when bound."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            {name: getattr(record, name) for name in _CONTEXT_FIELDS if getattr(record, name, None)}
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=True)


def _formatter_for(fmt: str) -> logging.Formatter:
    if (fmt or "plain").lower() == "json":
        return JsonFormatter()
    return logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )


def configure_logging(level_name: str, fmt: str, secrets: Iterable[str]) -> None:
    """Replace root handlers with one redacting stream handler."""

    redactor = SensitiveDataFilter(secrets)
    handler = logging.StreamHandler()
    handler.setFormatter(_formatter_for(fmt))
    handler.addFilter(redactor)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level_name.upper(), logging.INFO))
    logging.captureWarnings(True)

    for name in _NOISY_LOGGERS:
        noisy = logging.getLogger(name)
        noisy.handlers = []
        noisy.propagate = True
        noisy.addFilter(redactor)


__all__ = ["REDACTED", "SensitiveDataFilter", "JsonFormatter", "configure_logging"]
