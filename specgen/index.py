"""Render a Markdown endpoint index from a generated spec.

Groups operations by their first tag and renders templates/endpoints.md.j2.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2

from .writer import write_atomic

TEMPLATE_DIR = Path(__file__).parent / "templates"

_HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options", "trace")

UNTAGGED = "Other"


def _describe(method: str, path: str, operation: dict[str, Any]) -> str:
    """Build a one-line description for an operation."""
    summary = operation.get("summary", "")
    description = operation.get("description", "")

    if summary:
        text = summary
    elif description:
        text = description.split(".")[0]
    elif operation.get("operationId"):
        text = operation["operationId"]
    else:
        text = f"{method.upper()} {path}"

    text = " ".join(str(text).split()).rstrip(". ")
    # Pipes would break the Markdown table.
    return text.replace("|", "\\|")


def build_index_context(document: dict[str, Any]) -> dict[str, Any]:
    """Build the template context from a generated OpenAPI document."""
    groups: dict[str, list[dict[str, Any]]] = {}

    for tag in document.get("tags", []):
        name = tag.get("name") if isinstance(tag, dict) else tag
        if name:
            groups.setdefault(str(name), [])

    for path, path_item in document.get("paths", {}).items():
        if not isinstance(path_item, dict):
            continue
        for method in _HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            tags = operation.get("tags") or [UNTAGGED]
            groups.setdefault(str(tags[0]), []).append({
                "method": method.upper(),
                "path": path,
                "description": _describe(method, path, operation),
                "deprecated": bool(operation.get("deprecated", False)),
            })

    info = document.get("info", {})
    return {
        "title": info.get("title", ""),
        "version": info.get("version", ""),
        "servers": document.get("servers", []),
        "groups": {name: ops for name, ops in groups.items() if ops},
        "operation_count": sum(len(ops) for ops in groups.values()),
    }


def render_index(context: dict[str, Any]) -> str:
    """Render the endpoint index template."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("endpoints.md.j2")
    return template.render(**context)


def write_index(document: dict[str, Any], path: Path) -> Path:
    """Render the index for document and write it to path."""
    context = build_index_context(document)
    write_atomic(render_index(context), path)
    print(f"Generated {path} ({context['operation_count']} operations)")
    return path
