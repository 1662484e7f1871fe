"""Serialize the spec and write it to disk.

The write goes to a temporary file next to the target and is renamed into
place, so readers never see a half-written spec and a failed run leaves any
previous file untouched.
"""

from __future__ import annotations

import datetime
import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any

import yaml

from .errors import OutputError
from .loader import YAML_SUFFIXES


# Surrogate code points (from YAML "\ud800" escapes) cannot be encoded as UTF-8.
_LONE_SURROGATE = re.compile(r"[\ud800-\udfff]")


def _escape_surrogate(match: re.Match[str]) -> str:
    # Same escape JSON.stringify emits for unpaired surrogates.
    return f"\\u{ord(match.group()):04x}"


def _json_default(value: Any) -> Any:
    # YAML timestamps load as date/datetime.
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize(document: dict[str, Any], path: Path) -> str:
    """Render the document as JSON (2-space indent), or YAML for .yaml/.yml paths."""
    try:
        if path.suffix in YAML_SUFFIXES:
            return yaml.safe_dump(
                document, sort_keys=False, allow_unicode=True, default_flow_style=False,
            )
        text = json.dumps(document, indent=2, ensure_ascii=False, default=_json_default)
        return _LONE_SURROGATE.sub(_escape_surrogate, text)
    except (TypeError, ValueError, yaml.YAMLError) as exc:
        raise OutputError(f"cannot serialize spec for {path}: {exc}") from exc


def write_atomic(text: str, path: Path, encoding: str = "utf-8") -> Path:
    """Write text to path, replacing it in a single rename."""
    directory = path.parent
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            dir=directory,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        # NamedTemporaryFile is created 0600; give the spec normal permissions.
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, path)
    except BaseException as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        if isinstance(exc, (OSError, UnicodeError)):
            raise OutputError(f"cannot write {path}: {exc}") from exc
        raise
    return path


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask
