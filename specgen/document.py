"""Assemble the OpenAPI document from annotation fragments."""

from __future__ import annotations

import copy
from typing import Any

from .config import ServerDescriptor

# Root properties whose entries are merged one by one.
_MERGED_PROPERTIES = (
    "paths",
    "components",
    "definitions",
    "responses",
    "parameters",
    "securityDefinitions",
    "schemas",
    "consumes",
    "produces",
)

# Root properties that must be mappings of mappings; anything else would
# replace what earlier fragments merged in.
_MAPPING_PROPERTIES = (
    "paths",
    "components",
    "definitions",
    "responses",
    "parameters",
    "securityDefinitions",
    "schemas",
)

# Swagger 2 leftovers dropped from the output when nothing filled them.
_LEGACY_PROPERTIES = ("definitions", "responses", "parameters", "securityDefinitions")


def deep_merge(first: Any, second: Any) -> Any:
    """Merge two mappings recursively, values from second winning.

    Lists and scalars are replaced, not concatenated. Neither input is
    modified.
    """
    if not isinstance(first, dict) or not isinstance(second, dict):
        return copy.deepcopy(second)

    merged = copy.deepcopy(first)
    for key, value in second.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def prepare(definition: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of the base definition with empty paths/components."""
    document = copy.deepcopy(definition)
    document.setdefault("paths", {})
    document.setdefault("components", {})
    return document


def _has_tag(document: dict[str, Any], tag: Any) -> bool:
    name = tag.get("name") if isinstance(tag, dict) else tag
    return any(
        (existing.get("name") if isinstance(existing, dict) else existing) == name
        for existing in document.get("tags", [])
    )


def _kind(value: Any) -> str:
    return "null" if value is None else type(value).__name__


def fragment_problems(fragment: dict[str, Any]) -> list[str]:
    """Return why a fragment cannot be merged, or an empty list."""
    problems: list[str] = []
    for key, value in fragment.items():
        key = str(key)
        if key in _MAPPING_PROPERTIES:
            if not isinstance(value, dict):
                problems.append(f"{key} must be a mapping, got {_kind(value)}")
                continue
            for name, entry in value.items():
                if not isinstance(entry, dict) and not str(name).startswith("x-"):
                    problems.append(f"{key}.{name} must be a mapping, got {_kind(entry)}")
        elif key.startswith("/") and not isinstance(value, dict):
            problems.append(f"path {key} must be a mapping, got {_kind(value)}")
    return problems


def merge_fragment(document: dict[str, Any], fragment: dict[str, Any]) -> None:
    """Fold one annotation fragment into the document in place."""
    for key, value in fragment.items():
        key = str(key)
        if key == "x-webhooks":
            document[key] = copy.deepcopy(value)
        elif key.startswith("x-"):
            continue
        elif key in _MERGED_PROPERTIES and isinstance(value, dict):
            target = document.setdefault(key, {})
            for name, entry in value.items():
                target[name] = deep_merge(target.get(name), entry)
        elif key == "tags":
            tags = value if isinstance(value, list) else [value]
            for tag in tags:
                if not _has_tag(document, tag):
                    document.setdefault("tags", []).append(copy.deepcopy(tag))
        elif key.startswith("/"):
            paths = document.setdefault("paths", {})
            paths[key] = deep_merge(paths.get(key), value)
        else:
            document[key] = deep_merge(document.get(key), value)


def finalize(document: dict[str, Any]) -> dict[str, Any]:
    """Drop empty Swagger 2 properties left over from merging."""
    for key in _LEGACY_PROPERTIES:
        if key in document and not document[key]:
            del document[key]
    return document


def apply_servers(
    document: dict[str, Any], servers: tuple[ServerDescriptor, ...] | list[ServerDescriptor],
) -> dict[str, Any]:
    """Replace the servers list, whatever the extractor put there."""
    document["servers"] = [server.as_dict() for server in servers]
    return document
