"""
Pytest configuration for rustdoc index tests.

Fixture files under tests/fixtures/ are real rustdoc output:
- image/sidebar-items.js (initSidebarItems layout)
- implementors/**/trait.*.js (per-crate assignment layout)
"""
import shutil
from pathlib import Path

import pytest

from rustdoc_index.registry import IMPLEMENTORS_SINK, SIDEBAR_SINK


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def reset_global_sinks():
    """Keep the process-wide sinks isolated between tests."""
    SIDEBAR_SINK.reset()
    IMPLEMENTORS_SINK.reset()
    yield
    SIDEBAR_SINK.reset()
    IMPLEMENTORS_SINK.reset()


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def sidebar_js():
    return (FIXTURES_DIR / "image" / "sidebar-items.js").read_text(encoding="utf-8")


@pytest.fixture
def fromstr_js():
    return (FIXTURES_DIR / "implementors" / "core" / "str" / "trait.FromStr.js").read_text(encoding="utf-8")


@pytest.fixture
def project_root(tmp_path, monkeypatch):
    """Point the tools at a temporary project root."""
    monkeypatch.setenv("RUSTDOC_INDEX_ROOT", str(tmp_path))
    return tmp_path.resolve()


@pytest.fixture
def doc_tree(project_root):
    """A rustdoc output directory inside the temporary project."""
    doc_dir = project_root / "target" / "doc"
    shutil.copytree(FIXTURES_DIR, doc_dir)
    return doc_dir
