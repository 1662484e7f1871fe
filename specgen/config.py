"""Static configuration for the Swaps API spec.

SpecConfig is built once per run and passed into generation; nothing here
reads global state after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .loader import load_version

TITLE = "ZEUS Swaps API"
OPENAPI_VERSION = "3.0.0"
METADATA_PATH = Path("package.json")
SOURCE_GLOBS: tuple[str, ...] = ("./lib/api/v2/routers/*",)
OUTPUT_PATH = Path("swagger-spec.json")


@dataclass(frozen=True)
class ServerDescriptor:
    url: str
    description: str

    def as_dict(self) -> dict[str, str]:
        return {"url": self.url, "description": self.description}


# Order is preserved in the written document.
SWAPS_SERVERS: tuple[ServerDescriptor, ...] = (
    ServerDescriptor("https://swaps.zeuslsp.com/api/v2", "Mainnet"),
    ServerDescriptor("https://testnet-swaps.zeuslsp.com/api/v2", "Testnet"),
    ServerDescriptor("http://localhost:9006/v2", "Regtest"),
)


@dataclass(frozen=True)
class SpecConfig:
    """Inputs for one extraction run."""

    title: str
    version: str
    source_globs: tuple[str, ...]
    fail_on_errors: bool = True
    openapi_version: str = OPENAPI_VERSION
    base_dir: Path = field(default_factory=Path.cwd)
    encoding: str = "utf-8"

    def base_definition(self) -> dict[str, Any]:
        """Return a fresh document skeleton for the extractor to fill in."""
        return {
            "openapi": self.openapi_version,
            "info": {"title": self.title, "version": self.version},
        }


def build_config(
    metadata_path: Path | None = None,
    source_globs: tuple[str, ...] | list[str] | None = None,
    fail_on_errors: bool = True,
    base_dir: Path | None = None,
) -> SpecConfig:
    """Build the Swaps API config, reading the version from project metadata.

    Relative paths are resolved against base_dir (default: the current
    working directory).
    """
    root = base_dir or Path.cwd()
    metadata = metadata_path or METADATA_PATH
    if not metadata.is_absolute():
        metadata = root / metadata

    return SpecConfig(
        title=TITLE,
        version=load_version(metadata),
        source_globs=tuple(source_globs) if source_globs else SOURCE_GLOBS,
        fail_on_errors=fail_on_errors,
        base_dir=root,
    )
