"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory for every test."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[dict[str, str | None]], Path]:
    """Build a directory tree from a {relative path: content} mapping.

    A value of None creates an empty directory instead of a file.
    """

    def _make(layout: dict[str, str | None], root_name: str = "root") -> Path:
        root = tmp_path / root_name
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in layout.items():
            path = root / rel
            if content is None:
                path.mkdir(parents=True, exist_ok=True)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content)
        return root

    return _make


@pytest.fixture
def sample_tree(make_tree: Callable[..., Path]) -> Path:
    """Tree with two top-level files and one file in a sub-directory.

    root/
        a.txt   (5 bytes)
        b.log   (3 bytes)
        sub/
            c.txt (7 bytes)
    """
    return make_tree({"a.txt": "hello", "b.log": "log", "sub/c.txt": "content"})


@pytest.fixture
def deep_tree(make_tree: Callable[..., Path]) -> Path:
    """Three-level tree with an empty directory.

    root/
        top.txt
        one/
            one.txt
            two/
                two.txt
                three/
                    three.txt
        empty/
    """
    return make_tree(
        {
            "top.txt": "t",
            "one/one.txt": "11",
            "one/two/two.txt": "222",
            "one/two/three/three.txt": "3333",
            "empty": None,
        }
    )

