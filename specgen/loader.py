"""Load project metadata, resolve annotated sources, read existing specs."""

from __future__ import annotations

import glob
import json
import tomllib
from pathlib import Path
from typing import Any

import yaml

from .errors import MetadataError

YAML_SUFFIXES = (".yaml", ".yml")


def _read_metadata(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataError(f"cannot read project metadata {path}: {exc}") from exc

    try:
        if path.suffix == ".toml":
            return tomllib.loads(text)
        data = json.loads(text)
    except (ValueError, tomllib.TOMLDecodeError) as exc:
        raise MetadataError(f"cannot parse project metadata {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise MetadataError(f"project metadata {path} is not an object")
    return data


def load_version(path: Path) -> str:
    """Return the project version from package.json or pyproject.toml."""
    data = _read_metadata(path)

    if path.suffix == ".toml":
        version = data.get("project", {}).get("version")
        if version is None:
            version = data.get("tool", {}).get("poetry", {}).get("version")
    else:
        version = data.get("version")

    if not isinstance(version, str) or not version.strip():
        raise MetadataError(f"project metadata {path} has no version string")
    return version


def resolve_sources(globs: tuple[str, ...] | list[str], base_dir: Path) -> list[Path]:
    """Expand source globs relative to base_dir.

    Matches of each glob are sorted; glob order is kept and duplicates
    dropped so repeated runs see the same file order.
    """
    seen: set[Path] = set()
    sources: list[Path] = []
    for pattern in globs:
        for match in sorted(glob.glob(pattern, root_dir=base_dir, recursive=True)):
            path = base_dir / match
            if not path.is_file():
                continue
            key = path.resolve()
            if key in seen:
                continue
            seen.add(key)
            sources.append(path)
    return sources


def load_spec(path: Path) -> dict[str, Any]:
    """Load a previously generated spec from disk."""
    with open(path, encoding="utf-8") as f:
        if path.suffix in YAML_SUFFIXES:
            return yaml.safe_load(f)
        return json.load(f)
