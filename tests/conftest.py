from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures that lay out small directory trees under tmp_path.
"""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def abcd_root(tmp_path: Path) -> Path:
    """
    Minimal layout used by most navigation tests.

    Structure:
    /root
      a
      b
      /c
        d
    """
    root = tmp_path / "root"
    root.mkdir()
    (root / "a").write_text("a", encoding="utf-8")
    (root / "b").write_text("b", encoding="utf-8")
    (root / "c").mkdir()
    (root / "c" / "d").write_text("d", encoding="utf-8")
    return root


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """
    Deeper layout with nested directories, hidden and excluded entries.

    Structure:
    /project
      .env
      /.git
        HEAD
      README.md
      /docs
        guide.md
      /src
        /pkg
          core.py
          util.py
        main.py
      /node_modules
        lib.js
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / ".env").write_text("X=1", encoding="utf-8")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref", encoding="utf-8")
    (root / "README.md").write_text("# Project", encoding="utf-8")
    (root / "docs").mkdir()
    (root / "docs" / "guide.md").write_text("guide", encoding="utf-8")
    (root / "src").mkdir()
    (root / "src" / "pkg").mkdir()
    (root / "src" / "pkg" / "core.py").write_text("", encoding="utf-8")
    (root / "src" / "pkg" / "util.py").write_text("", encoding="utf-8")
    (root / "src" / "main.py").write_text("", encoding="utf-8")
    (root / "node_modules").mkdir()
    (root / "node_modules" / "lib.js").write_text("", encoding="utf-8")
    return root


@pytest.fixture
def isolated_config(tmp_path: Path):
    """Point the config file at a temporary location for the whole test."""
    config_file = tmp_path / "config" / "config.json"
    with patch("filenav.domain.config.CONFIG_FILE", str(config_file)):
        yield config_file
