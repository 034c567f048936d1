"""Shared pytest fixtures for all tests."""

import logging
import os

import pytest

from common.logging_config import LIBRARY_LOGGERS

SMALL_CHUNK_SIZE = 1024


@pytest.fixture
def chunks_dir(tmp_path):
    """
    Create a temporary chunk directory.

    Returns:
        Path to an empty chunks directory
    """
    path = tmp_path / 'chunks'
    path.mkdir()
    return path


@pytest.fixture
def make_file(tmp_path):
    """
    Factory writing a source file with random content.

    Returns:
        Callable (name, size) -> Path
    """
    source_dir = tmp_path / 'source'
    source_dir.mkdir()

    def _make_file(name: str, size: int):
        path = source_dir / name
        path.write_bytes(os.urandom(size))
        return path

    return _make_file


@pytest.fixture
def build_tree(tmp_path):
    """
    Create a small build tree with one large and several small files.

    Returns:
        Path to the build directory
    """
    build = tmp_path / 'build'
    (build / 'Build').mkdir(parents=True)
    (build / 'index.html').write_text('<html><body>game</body></html>')
    (build / 'Build' / 'game.data').write_bytes(os.urandom(5 * SMALL_CHUNK_SIZE + 17))
    (build / 'Build' / 'game.framework.js.gz').write_bytes(b'\x1f\x8b' + os.urandom(64))
    (build / 'Build' / 'loader.js').write_text('console.log("loader");')
    return build


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging so each test starts clean."""
    yield
    for name in LIBRARY_LOGGERS:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
