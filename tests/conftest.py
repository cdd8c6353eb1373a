from pathlib import Path
from typing import Dict, Union

import pytest


@pytest.fixture(autouse=True)
def home(tmp_path_factory, monkeypatch) -> Path:
    """Keep the developer's git config and global excludes out of the tests."""
    home_dir = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home_dir / ".config"))
    return home_dir


@pytest.fixture
def make_tree(tmp_path):
    """Create files below ``tmp_path`` from a ``{relative path: content}`` map."""

    def _make(files: Dict[str, Union[str, bytes]]) -> Path:
        for rel, content in files.items():
            p = tmp_path / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                p.write_bytes(content)
            else:
                p.write_text(content, encoding="utf-8")
        return tmp_path

    return _make
