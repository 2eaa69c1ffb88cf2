"""Test configuration and fixtures for struct."""

import os

import pytest


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


@pytest.fixture
def project_dir(tmp_path):
    """Create a small project with a mix of shown and default-ignored entries.

    project/
        app.pyc                     (ignored by default)
        docs/readme.md
        node_modules/lib/index.js   (ignored by default)
        notes.tmp
        run.sh                      (executable)
        src/__pycache__/main.cpython-311.pyc   (ignored by default)
        src/main.py
        src/utils/helpers.py
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / "src").mkdir()
    (root / "src" / "main.py").write_text("print('hi')\n")
    (root / "src" / "utils").mkdir()
    (root / "src" / "utils" / "helpers.py").write_text("def helper():\n    pass\n")
    (root / "src" / "__pycache__").mkdir()
    (root / "src" / "__pycache__" / "main.cpython-311.pyc").write_bytes(b"\x00" * 16)
    (root / "node_modules" / "lib").mkdir(parents=True)
    (root / "node_modules" / "lib" / "index.js").write_text("export default {}\n")
    (root / "docs").mkdir()
    (root / "docs" / "readme.md").write_text("# Docs\n")
    (root / "run.sh").write_text("#!/bin/sh\necho hi\n")
    os.chmod(root / "run.sh", 0o755)
    (root / "notes.tmp").write_text("scratch\n")
    (root / "app.pyc").write_bytes(b"\x00" * 8)
    return root
