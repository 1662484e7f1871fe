"""Tests for annotation extraction over a project tree."""

import logging

import pytest

from specgen.config import build_config
from specgen.errors import AnnotationError
from specgen.extractor import AnnotationExtractor

from conftest import BROKEN_ROUTER, NODES_ROUTER


class TestAnnotationExtractor:

    def test_base_document(self, project):
        doc = AnnotationExtractor().extract(build_config(base_dir=project))
        assert doc["openapi"] == "3.0.0"
        assert doc["info"] == {"title": "ZEUS Swaps API", "version": "1.2.3"}
        assert list(doc["paths"]["/swap"]) == ["get"]
        assert doc["tags"] == [{"name": "Swap", "description": "Swap related endpoints"}]
        assert list(doc)[:3] == ["openapi", "info", "paths"]

    def test_files_merged_in_sorted_order(self, project, routers_dir, write):
        write(routers_dir / "NodesRouter.ts", NODES_ROUTER)
        doc = AnnotationExtractor().extract(build_config(base_dir=project))
        assert list(doc["paths"]) == ["/nodes", "/swap"]
        assert doc["components"]["schemas"]["NodeInfo"]["type"] == "object"

    def test_yaml_sources(self, project, write):
        write(project / "docs" / "errors.yaml", "components:\n  responses:\n    Error:\n      description: Error\n")
        config = build_config(
            base_dir=project, source_globs=["./lib/api/v2/routers/*", "docs/*.yaml"],
        )
        doc = AnnotationExtractor().extract(config)
        assert doc["components"]["responses"] == {"Error": {"description": "Error"}}

    def test_malformed_annotation_fails(self, project, routers_dir, write):
        write(routers_dir / "BrokenRouter.ts", BROKEN_ROUTER)
        with pytest.raises(AnnotationError) as excinfo:
            AnnotationExtractor().extract(build_config(base_dir=project))
        assert len(excinfo.value.problems) == 1
        assert "BrokenRouter.ts:" in excinfo.value.problems[0]

    def test_all_problems_reported(self, project, routers_dir, write):
        write(routers_dir / "A.ts", BROKEN_ROUTER)
        write(routers_dir / "B.ts", BROKEN_ROUTER)
        with pytest.raises(AnnotationError) as excinfo:
            AnnotationExtractor().extract(build_config(base_dir=project))
        assert len(excinfo.value.problems) == 2

    def test_malformed_annotation_skipped_when_lenient(self, project, routers_dir, write, caplog):
        write(routers_dir / "BrokenRouter.ts", BROKEN_ROUTER)
        config = build_config(base_dir=project, fail_on_errors=False)
        with caplog.at_level(logging.WARNING, logger="specgen"):
            doc = AnnotationExtractor().extract(config)
        assert list(doc["paths"]) == ["/swap"]
        assert "BrokenRouter.ts" in caplog.text

    def test_no_sources_fails(self, project, routers_dir):
        (routers_dir / "SwapRouter.ts").unlink()
        with pytest.raises(AnnotationError, match="no source files match"):
            AnnotationExtractor().extract(build_config(base_dir=project))

    def test_no_sources_lenient_gives_empty_paths(self, project, routers_dir):
        (routers_dir / "SwapRouter.ts").unlink()
        doc = AnnotationExtractor().extract(build_config(base_dir=project, fail_on_errors=False))
        assert doc["paths"] == {}

    def test_undecodable_source_fails(self, project, routers_dir):
        (routers_dir / "Binary.ts").write_bytes(b"\xff\xfe\x00broken")
        with pytest.raises(AnnotationError, match="cannot read source"):
            AnnotationExtractor().extract(build_config(base_dir=project, fail_on_errors=False))


class TestFragmentValidation:
    """Annotations that would wipe earlier routes never reach the document."""

    NULL_PATHS = "/**\n * @openapi\n * paths:\n */\n"

    def test_null_paths_fails(self, project, routers_dir, write):
        write(routers_dir / "Tail.ts", self.NULL_PATHS)
        with pytest.raises(AnnotationError) as excinfo:
            AnnotationExtractor().extract(build_config(base_dir=project))
        assert excinfo.value.problems == [
            f"{routers_dir / 'Tail.ts'}:3: paths must be a mapping, got null",
        ]

    def test_null_paths_skipped_when_lenient(self, project, routers_dir, write):
        write(routers_dir / "Tail.ts", self.NULL_PATHS)
        doc = AnnotationExtractor().extract(build_config(base_dir=project, fail_on_errors=False))
        assert list(doc["paths"]) == ["/swap"]

    def test_null_path_item_keeps_operations(self, project, routers_dir, write):
        write(routers_dir / "Tail.ts", "/**\n * @openapi\n * /swap:\n */\n")
        doc = AnnotationExtractor().extract(build_config(base_dir=project, fail_on_errors=False))
        assert "get" in doc["paths"]["/swap"]


class TestSharedAnchors:

    def test_alias_to_anchor_in_another_router(self, project, routers_dir, write):
        write(routers_dir / "ErrorResponses.ts", (
            "/**\n * @openapi\n * components:\n *   responses:\n"
            " *     Err: &err\n *       description: Error\n */\n"
        ))
        write(routers_dir / "QuoteRouter.ts", (
            "/**\n * @openapi\n * /quote:\n *   get:\n *     responses:\n"
            " *       '400': *err\n */\n"
        ))
        doc = AnnotationExtractor().extract(build_config(base_dir=project))
        assert doc["paths"]["/quote"]["get"]["responses"]["400"] == {"description": "Error"}
        assert doc["components"]["responses"]["Err"] == {"description": "Error"}
