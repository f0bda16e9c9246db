"""Mapping documents: loading and event path resolution."""

from trigger_dispatcher.mapping.loader import (
    FALLBACK_MAPPING,
    MappingLoadResult,
    load_mapping_document,
)
from trigger_dispatcher.mapping.resolver import MappingResolver, as_code, flatten

__all__ = [
    "FALLBACK_MAPPING",
    "MappingLoadResult",
    "MappingResolver",
    "as_code",
    "flatten",
    "load_mapping_document",
]
