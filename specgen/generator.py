"""Generate the Swaps API OpenAPI document and write it to disk.

Pipeline: config -> extraction -> servers -> serialization -> file write.
Any failure propagates as a SpecGenError and nothing is written.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .config import OUTPUT_PATH, SWAPS_SERVERS, ServerDescriptor, SpecConfig
from .document import apply_servers
from .extractor import AnnotationExtractor, Extractor
from .writer import serialize, write_atomic

logger = logging.getLogger(__name__)


def build_spec(
    config: SpecConfig,
    extractor: Extractor | None = None,
    servers: tuple[ServerDescriptor, ...] = SWAPS_SERVERS,
) -> dict[str, Any]:
    """Extract the document and set its servers, without writing anything."""
    extractor = extractor or AnnotationExtractor()
    document = extractor.extract(config)
    return apply_servers(document, servers)


def generate(
    config: SpecConfig,
    extractor: Extractor | None = None,
    servers: tuple[ServerDescriptor, ...] = SWAPS_SERVERS,
    output: Path | None = None,
) -> Path:
    """Build the spec and write it to output (default swagger-spec.json in base_dir)."""
    output_path = output or OUTPUT_PATH
    if not output_path.is_absolute():
        output_path = config.base_dir / output_path

    document = build_spec(config, extractor, servers)
    text = serialize(document, output_path)
    write_atomic(text, output_path)

    paths = document.get("paths")
    count = len(paths) if isinstance(paths, dict) else 0
    logger.info("wrote %s (%d characters)", output_path, len(text))
    print(f"Generated {output_path} ({count} paths)")
    return output_path
