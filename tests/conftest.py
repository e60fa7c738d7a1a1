"""
Pytest Configuration and Fixtures
"""

import os
import tempfile
from pathlib import Path

# Settings are read at import time; keep test runs away from the real data dir
_test_data_dir = Path(tempfile.mkdtemp(prefix="content-export-tests-"))
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("CONTENT_DIR", str(_test_data_dir / "content"))
os.environ.setdefault("TEMPLATES_DIR", str(_test_data_dir / "templates"))
os.environ.setdefault("TEMP_DIR", str(_test_data_dir / "temp"))
os.environ.setdefault("LOGS_DIR", str(_test_data_dir / "logs"))

import pytest

from core.conversion import ConversionModel, InMemoryModelOrchestrator


@pytest.fixture
def make_converter(tmp_path):
    """Write an executable shell script and return its path.

    The script is called as ``<script> -s <source> -o <target>``, so the
    source is ``$2`` and the target ``$4``.
    """
    def _make(body: str, name: str = "converter.sh") -> str:
        script = tmp_path / name
        script.write_text("#!/bin/sh\n" + body + "\n")
        script.chmod(0o755)
        return str(script)
    return _make


@pytest.fixture
def sample_models():
    """Root item plus a nested chapter"""
    install = ConversionModel(
        route="guide/install",
        title="Installing",
        level=2,
        content="<p>Run the installer.</p>",
    )
    guide = ConversionModel(
        route="guide",
        title="User Guide",
        level=1,
        description="Everything about the product",
        content="<p>Start here.</p>",
        children=(install,),
    )
    root = ConversionModel(
        route="",
        title="My Document",
        level=0,
        type="repository",
        content="<p>Welcome</p>",
        children=(guide,),
    )
    return {"root": root, "guide": guide, "install": install}


@pytest.fixture
def orchestrator(sample_models):
    index = InMemoryModelOrchestrator()
    for model in sample_models.values():
        index.add(model)
    return index
