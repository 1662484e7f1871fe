"""Entry point: python -m specgen

Reads package.json and the annotated routers under lib/api/v2/routers/,
writes swagger-spec.json.

Usage:
    python -m specgen                  # generate swagger-spec.json
    python -m specgen --check          # fail if swagger-spec.json is stale
    python -m specgen --index API.md   # also write a Markdown endpoint index
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from .config import METADATA_PATH, OUTPUT_PATH, SOURCE_GLOBS, build_config
from .errors import SpecGenError
from .generator import build_spec, generate
from .index import write_index
from .loader import load_spec
from .writer import serialize

logger = logging.getLogger("specgen")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="swaps-spec",
        description="Generate the ZEUS Swaps API OpenAPI spec from route annotations.",
    )
    parser.add_argument(
        "--metadata", type=Path, default=METADATA_PATH,
        help=f"project metadata holding the version (default: {METADATA_PATH})",
    )
    parser.add_argument(
        "--source", dest="sources", action="append", metavar="GLOB",
        help=f"annotated source glob, repeatable (default: {' '.join(SOURCE_GLOBS)})",
    )
    parser.add_argument(
        "--output", type=Path, default=OUTPUT_PATH,
        help=f"spec file to write, .json or .yaml (default: {OUTPUT_PATH})",
    )
    parser.add_argument(
        "--no-fail-on-errors", dest="fail_on_errors", action="store_false",
        help="skip malformed annotations instead of failing",
    )
    parser.add_argument(
        "--check", action="store_true",
        help="verify the output file is up to date instead of writing it",
    )
    parser.add_argument(
        "--index", type=Path, metavar="PATH",
        help="also write a Markdown endpoint index",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def _check(document: dict, output: Path) -> bool:
    """Return True if output holds the same document."""
    if not output.exists():
        print(f"{output} does not exist", file=sys.stderr)
        return False
    # Both sides go through the JSON serializer so YAML dates compare as strings.
    as_json = Path("spec.json")
    try:
        current = json.loads(serialize(load_spec(output), as_json))
    except (ValueError, yaml.YAMLError):
        current = None
    expected = json.loads(serialize(document, as_json))
    if current != expected:
        print(f"{output} is out of date, run: python -m specgen", file=sys.stderr)
        return False
    print(f"{output} is up to date")
    return True


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(
            metadata_path=args.metadata,
            source_globs=args.sources,
            fail_on_errors=args.fail_on_errors,
        )
        output = args.output if args.output.is_absolute() else config.base_dir / args.output

        if args.check:
            document = build_spec(config)
            return 0 if _check(document, output) else 1

        generate(config, output=output)
        if args.index:
            write_index(load_spec(output), args.index)
    except SpecGenError as exc:
        logger.debug("generation failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
