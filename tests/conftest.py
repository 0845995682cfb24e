"""
Shared fixtures for the threadgrep test suite
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Union

import pytest

TreeLayout = Dict[str, Union[str, bytes]]


@pytest.fixture
def make_tree() -> Callable[[Path, TreeLayout], Path]:
    """
    Build a directory tree from ``{relative_path: content}``

    A path ending in ``/`` creates an empty directory.
    """
    def build(root: Path, layout: TreeLayout) -> Path:
        for rel_path, content in layout.items():
            target = root / rel_path
            if rel_path.endswith('/'):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding='utf-8')
        return root

    return build


@pytest.fixture
def restore_logging():
    """Undo configure_logging() changes made during a test"""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers = handlers
    root_logger.setLevel(level)
