"""Mapping document loading.

Loading never raises: the result carries either the document or the load
error, so callers decide explicitly whether to fall back to
:data:`FALLBACK_MAPPING`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests

from trigger_dispatcher.errors import MappingLoadFailure

logger = logging.getLogger(__name__)

FALLBACK_MAPPING: dict[str, int] = {
    "system.test": 99,
    "system.initialized": 1,
    "system.error": 2,
}


@dataclass(frozen=True, slots=True)
class MappingLoadResult:
    """Either a loaded document or the reason it could not be loaded."""

    source: str
    document: dict[str, Any] | None = None
    error: MappingLoadFailure | None = None

    @property
    def used_fallback(self) -> bool:
        return self.document is None

    def or_fallback(self) -> dict[str, Any]:
        if self.document is not None:
            return self.document
        return dict(FALLBACK_MAPPING)


def load_mapping_document(
    source: str | Path,
    *,
    timeout: float = 5.0,
    session: requests.Session | None = None,
) -> MappingLoadResult:
    """Load a mapping document from a local file or an http(s) URL."""

    location = str(source)
    logger.info("Loading trigger mappings", extra={"source": location})

    try:
        if location.startswith(("http://", "https://")):
            raw = _fetch(location, timeout=timeout, session=session)
        else:
            raw = json.loads(Path(location).read_text(encoding="utf-8"))
    except (OSError, requests.RequestException, ValueError) as e:
        return _failed(location, str(e))

    if not isinstance(raw, dict):
        return _failed(location, f"expected a JSON object, got {type(raw).__name__}")

    logger.info(
        "Trigger mappings loaded",
        extra={"source": location, "top_level_keys": len(raw)},
    )
    return MappingLoadResult(source=location, document=raw)


def _fetch(url: str, *, timeout: float, session: requests.Session | None) -> Any:
    http = session or requests.Session()
    try:
        resp = http.get(url, timeout=timeout)
        if not resp.ok:
            raise ValueError(f"HTTP status {resp.status_code}")
        return resp.json()
    finally:
        if session is None:
            http.close()


def _failed(source: str, reason: str) -> MappingLoadResult:
    error = MappingLoadFailure(source, reason)
    logger.error(str(error), extra={"source": source})
    return MappingLoadResult(source=source, error=error)
