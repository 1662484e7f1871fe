"""Find and parse OpenAPI annotations in source files.

Two kinds of source are understood:

- YAML files (.yaml/.yml): every document in the file is a fragment.
- Anything else: block comments (/* ... */, including JSDoc /** ... */)
  are scanned for an @openapi or @swagger tag. The YAML text following
  the tag, up to the next tag or the end of the comment, is a fragment.

  /**
   * @openapi
   * /swap:
   *   get:
   *     description: List swaps
   */

Comment annotations share YAML anchors: an alias that is undefined in its
own annotation is resolved against anchors defined by other comment
annotations of the same run.

Parse problems are reported as "file:line: message" strings with 1-based
line numbers pointing into the original file.
"""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .document import fragment_problems
from .loader import YAML_SUFFIXES

ANNOTATION_TAGS = ("openapi", "swagger")

_BLOCK_COMMENT = re.compile(r"/\*(.*?)\*/", re.DOTALL)
_GUTTER = re.compile(r"^[ \t]*\* ?")
_TAG_LINE = re.compile(r"^\s*@(\w+)\b[ \t]*(.*)$")


@dataclass(frozen=True)
class Snippet:
    """Unparsed YAML text of one annotation.

    multi is set for whole YAML files, which may hold several documents.
    """

    source: Path
    line: int
    text: str
    multi: bool = False


@dataclass(frozen=True)
class Annotation:
    """One parsed fragment and where it came from."""

    source: Path
    line: int
    data: dict[str, Any]


def _problem(source: Path, line: int, message: str) -> str:
    return f"{source}:{line}: {message}"


def _yaml_problem(source: Path, first_line: int, exc: yaml.YAMLError) -> str:
    mark = getattr(exc, "problem_mark", None) or getattr(exc, "context_mark", None)
    line = first_line + mark.line if mark is not None else first_line
    message = " ".join(str(exc).split())
    return _problem(source, line, message)


def _fragment(
    source: Path, line: int, data: Any, annotations: list[Annotation], problems: list[str],
) -> None:
    if data is None:
        return
    if not isinstance(data, dict):
        problems.append(
            _problem(source, line, f"annotation must be a mapping, got {type(data).__name__}")
        )
        return
    invalid = fragment_problems(data)
    if invalid:
        problems.extend(_problem(source, line, message) for message in invalid)
        return
    annotations.append(Annotation(source=source, line=line, data=data))


def _strip_gutter(body: str) -> list[str]:
    """Remove the leading ' * ' gutter of each comment line that has one."""
    return [_GUTTER.sub("", line, count=1) for line in body.split("\n")]


def _tagged_segments(lines: list[str]) -> list[tuple[int, str]]:
    """Return (line offset, yaml text) for every annotation tag in a comment."""
    segments: list[tuple[int, str]] = []
    current: list[str] | None = None
    start = 0

    for offset, line in enumerate(lines):
        match = _TAG_LINE.match(line)
        if match is None:
            if current is not None:
                current.append(line)
            continue

        if current is not None:
            segments.append((start, textwrap.dedent("\n".join(current))))
            current = None

        tag, rest = match.groups()
        if tag in ANNOTATION_TAGS:
            # YAML may begin on the tag line itself ("@openapi /swap:" is rare but valid).
            current = [rest] if rest.strip() else []
            start = offset if rest.strip() else offset + 1

    if current is not None:
        segments.append((start, textwrap.dedent("\n".join(current))))
    return segments


def comment_snippets(source: Path, text: str) -> list[Snippet]:
    """Collect the annotation snippets of a source file's block comments."""
    snippets: list[Snippet] = []
    for match in _BLOCK_COMMENT.finditer(text):
        comment_line = text.count("\n", 0, match.start()) + 1
        lines = _strip_gutter(match.group(1))
        for offset, snippet in _tagged_segments(lines):
            snippets.append(Snippet(source=source, line=comment_line + offset, text=snippet))
    return snippets


def find_snippets(source: Path, text: str) -> list[Snippet]:
    """Dispatch on file type and return the file's snippets."""
    if source.suffix.lower() in YAML_SUFFIXES:
        return [Snippet(source=source, line=1, text=text, multi=True)]
    return comment_snippets(source, text)


def _load(snippet: Snippet) -> list[Any]:
    if snippet.multi:
        return list(yaml.safe_load_all(snippet.text))
    return [yaml.safe_load(snippet.text)]


def _is_undefined_alias(exc: yaml.YAMLError) -> bool:
    return (
        isinstance(exc, yaml.composer.ComposerError)
        and "undefined alias" in (exc.problem or "")
    )


def _anchors_and_aliases(text: str) -> tuple[set[str], set[str]]:
    """Return the anchor names a snippet defines and the aliases it uses."""
    anchors: set[str] = set()
    aliases: set[str] = set()
    try:
        for event in yaml.parse(text, Loader=yaml.SafeLoader):
            name = getattr(event, "anchor", None)
            if name is None:
                continue
            if isinstance(event, yaml.AliasEvent):
                aliases.add(name)
            else:
                anchors.add(name)
    except yaml.YAMLError:
        # Syntax errors are reported when the snippet is loaded.
        return set(), set()
    return anchors, aliases


def _with_anchors(
    snippet: Snippet, anchored: dict[str, int], snippets: list[Snippet],
) -> str | None:
    """Prepend the snippets defining the anchors this snippet is missing."""
    own, aliases = _anchors_and_aliases(snippet.text)
    providers = sorted({anchored[name] for name in aliases - own if name in anchored})
    if not providers:
        return None
    return "\n".join([snippets[index].text for index in providers] + [snippet.text])


def parse_snippets(snippets: list[Snippet]) -> tuple[list[Annotation], list[str]]:
    """Parse snippets in order and return (annotations, problems)."""
    loaded: list[list[Any] | None] = []
    failures: dict[int, yaml.YAMLError] = {}
    anchored: dict[str, int] = {}

    for index, snippet in enumerate(snippets):
        try:
            loaded.append(_load(snippet))
        except yaml.YAMLError as exc:
            loaded.append(None)
            failures[index] = exc
            continue
        if not snippet.multi:
            for name in _anchors_and_aliases(snippet.text)[0]:
                anchored[name] = index

    for index, exc in list(failures.items()):
        snippet = snippets[index]
        if snippet.multi or not _is_undefined_alias(exc):
            continue
        text = _with_anchors(snippet, anchored, snippets)
        if text is None:
            continue
        try:
            loaded[index] = [yaml.safe_load(text)]
        except yaml.YAMLError:
            # Keep the original error; its line numbers match the source.
            continue
        del failures[index]

    annotations: list[Annotation] = []
    problems: list[str] = []
    for index, snippet in enumerate(snippets):
        if index in failures:
            problems.append(_yaml_problem(snippet.source, snippet.line, failures[index]))
            continue
        for data in loaded[index] or []:
            _fragment(snippet.source, snippet.line, data, annotations, problems)
    return annotations, problems


def scan_comments(source: Path, text: str) -> tuple[list[Annotation], list[str]]:
    """Extract annotations from the block comments of a single source file."""
    return parse_snippets(comment_snippets(source, text))


def scan_yaml(source: Path, text: str) -> tuple[list[Annotation], list[str]]:
    """Extract annotations from a standalone YAML file."""
    return parse_snippets([Snippet(source=source, line=1, text=text, multi=True)])
