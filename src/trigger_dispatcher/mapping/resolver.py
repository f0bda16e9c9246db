"""Event path to trigger code resolution.

Mapping documents can be authored flat (``{"scenes.intro.start": 10}``) or
nested (``{"scenes": {"intro": {"start": 10}}}``). Callers use the same
dot-delimited event path either way.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from trigger_dispatcher.errors import InvalidLeaf, NotFound

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "."

MappingDocument = Mapping[str, Any]


def as_code(value: Any) -> int | None:
    """Return ``value`` as a trigger code, or None if it is not numeric.

    Booleans are rejected; floats are accepted only when integral.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return None


class MappingResolver:
    """Resolves event paths against a loaded mapping document."""

    def __init__(self, document: MappingDocument | None = None) -> None:
        self._document: MappingDocument | None = None
        if document is not None:
            self.load(document)

    @property
    def loaded(self) -> bool:
        return self._document is not None

    @property
    def document(self) -> MappingDocument | None:
        return self._document

    def load(self, document: MappingDocument) -> None:
        """Replace the current document wholesale."""

        self._document = document
        logger.debug("Mapping document loaded", extra={"top_level_keys": len(document)})

    def resolve(self, path: str) -> int:
        """Resolve ``path`` to a trigger code.

        Raises:
            NotFound: If no document is loaded or a segment is absent.
            InvalidLeaf: If the path ends on a non-numeric value.
        """
        document = self._document
        if document is None:
            raise NotFound(path, reason="mapping not loaded")

        # Flat documents store the full dotted path as one key.
        if path in document:
            code = as_code(document[path])
            if code is not None:
                return code

        current: Any = document
        for part in path.split(PATH_SEPARATOR):
            if not isinstance(current, Mapping) or part not in current:
                raise NotFound(path)
            current = current[part]

        code = as_code(current)
        if code is None:
            raise InvalidLeaf(path, current)
        return code


def flatten(document: MappingDocument, prefix: str = "") -> dict[str, int]:
    """Return every numeric leaf of ``document`` keyed by its dotted path."""

    flat: dict[str, int] = {}
    for key, value in document.items():
        path = f"{prefix}{PATH_SEPARATOR}{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten(value, path))
            continue
        code = as_code(value)
        if code is not None:
            flat[path] = code
    return flat
