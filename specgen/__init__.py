"""Generate the OpenAPI document for the ZEUS Swaps API from route annotations."""

from __future__ import annotations

from .config import SWAPS_SERVERS, ServerDescriptor, SpecConfig, build_config
from .errors import AnnotationError, MetadataError, OutputError, SpecGenError
from .generator import build_spec, generate

__all__ = [
    "SWAPS_SERVERS",
    "AnnotationError",
    "MetadataError",
    "OutputError",
    "ServerDescriptor",
    "SpecConfig",
    "SpecGenError",
    "build_config",
    "build_spec",
    "generate",
]
