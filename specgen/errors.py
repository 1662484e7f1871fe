"""Errors raised while generating the OpenAPI spec.

Everything derives from SpecGenError so the CLI can report any failure
with a single handler and a non-zero exit code.
"""

from __future__ import annotations


class SpecGenError(Exception):
    """Base class for all spec generation failures."""


class MetadataError(SpecGenError):
    """Project metadata is missing, unreadable or has no usable version."""


class AnnotationError(SpecGenError):
    """One or more source annotations could not be extracted."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__(
            "invalid API annotations:\n" + "\n".join(f"  {p}" for p in self.problems)
        )


class OutputError(SpecGenError):
    """The generated spec could not be written."""
