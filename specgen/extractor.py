"""Annotation extraction: turn annotated sources into an OpenAPI document.

The generator only depends on the Extractor protocol, so any object with an
extract(config) method can stand in for the annotation scanner.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

from .annotations import Annotation, Snippet, find_snippets, parse_snippets
from .config import SpecConfig
from .document import finalize, merge_fragment, prepare
from .errors import AnnotationError
from .loader import resolve_sources

logger = logging.getLogger(__name__)


class Extractor(Protocol):
    def extract(self, config: SpecConfig) -> dict[str, Any]: ...


class AnnotationExtractor:
    """Scan the configured source globs for @openapi/@swagger annotations."""

    def extract(self, config: SpecConfig) -> dict[str, Any]:
        sources = resolve_sources(config.source_globs, config.base_dir)
        if not sources:
            message = (
                f"no source files match {', '.join(config.source_globs)} "
                f"(relative to {config.base_dir})"
            )
            if config.fail_on_errors:
                raise AnnotationError([message])
            logger.warning(message)

        annotations = self._collect(sources, config)

        document = prepare(config.base_definition())
        for annotation in annotations:
            merge_fragment(document, annotation.data)

        logger.debug(
            "extracted %d annotations from %d files", len(annotations), len(sources),
        )
        return finalize(document)

    def _collect(self, sources: list[Path], config: SpecConfig) -> list[Annotation]:
        snippets: list[Snippet] = []

        for source in sources:
            try:
                text = source.read_text(encoding=config.encoding)
            except (OSError, UnicodeDecodeError) as exc:
                raise AnnotationError([f"{source}: cannot read source: {exc}"]) from exc

            found = find_snippets(source, text)
            logger.debug("%s: %d annotations", source, len(found))
            snippets.extend(found)

        # Parsed together so aliases can refer to anchors in other files.
        annotations, problems = parse_snippets(snippets)

        if problems:
            if config.fail_on_errors:
                raise AnnotationError(problems)
            for problem in problems:
                logger.warning("skipping annotation: %s", problem)

        return annotations
