"""Shared fixtures: a throwaway project with package.json and annotated routers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

SWAP_ROUTER = """\
import { Router } from 'express';

/**
 * @openapi
 * tags:
 *   - name: Swap
 *     description: Swap related endpoints
 */

/**
 * @openapi
 * /swap:
 *   get:
 *     description: List pending swaps
 *     tags: [Swap]
 *     responses:
 *       '200':
 *         description: Pending swaps
 */
router.get('/swap', this.handleError(this.listSwaps));
"""

NODES_ROUTER = """\
/**
 * @openapi
 * components:
 *   schemas:
 *     NodeInfo:
 *       type: object
 *       properties:
 *         publicKey:
 *           type: string
 */

/**
 * Node endpoints.
 *
 * @openapi
 * /nodes:
 *   get:
 *     summary: Lightning nodes of the backend
 *     tags: [Nodes]
 *     responses:
 *       '200':
 *         description: Node info by currency
 */
router.get('/nodes', this.handleError(this.getNodes));
"""

BROKEN_ROUTER = """\
/**
 * @openapi
 * /broken:
 *   get:
 *     description: [never closed
 */
"""


def write_file(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def routers_dir(tmp_path: Path) -> Path:
    return tmp_path / "lib" / "api" / "v2" / "routers"


@pytest.fixture
def project(tmp_path: Path, routers_dir: Path) -> Path:
    """Project root with version 1.2.3 and one router defining GET /swap."""
    write_file(tmp_path / "package.json", json.dumps({"name": "boltz-backend", "version": "1.2.3"}))
    write_file(routers_dir / "SwapRouter.ts", SWAP_ROUTER)
    return tmp_path


@pytest.fixture
def write():
    """Return a helper that writes text to a path, creating parent dirs."""
    return write_file
