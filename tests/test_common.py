"""Tests for shared helpers: formatting, logging setup and skeleton templates."""

import logging
import sys

import pytest

from cli.skeleton import skeleton_files, write_skeleton
from common.logging_config import get_logger, setup_logging
from common.utils import format_file_size, megabytes_to_bytes


@pytest.mark.parametrize("size,expected", [
    (0, "0 B"),
    (512, "512 B"),
    (1536, "1.50 KiB"),
    (50 * 1024 * 1024, "50.00 MiB"),
    (125_829_120, "120.00 MiB"),
    (3 * 1024 ** 3, "3.00 GiB"),
])
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_megabytes_to_bytes():
    assert megabytes_to_bytes(50) == 52_428_800
    assert megabytes_to_bytes(0.5) == 524_288


class TestLoggingSetup:
    """setup_logging configures component and library loggers once."""

    def test_level_from_argument(self):
        logger = setup_logging('server', log_level='DEBUG')

        assert logger.name == 'server'
        assert logger.level == logging.DEBUG
        assert logging.getLogger('chunkstore').level == logging.DEBUG

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv('LOG_LEVEL', 'warning')

        logger = setup_logging('cli')

        assert logger.level == logging.WARNING

    def test_unknown_level_defaults_to_info(self):
        assert setup_logging('cli', log_level='LOUD').level == logging.INFO

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging('server')
        setup_logging('cli')

        for name in ('server', 'cli', 'chunkstore', 'common'):
            assert len(logging.getLogger(name).handlers) == 1

    def test_handler_writes_to_stdout(self):
        logger = setup_logging('server')

        handler = logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stdout

    def test_get_logger(self):
        assert get_logger('chunkstore.splitter') is logging.getLogger('chunkstore.splitter')


class TestSkeleton:
    """Project skeleton files."""

    def test_files(self):
        files = skeleton_files('my-game')

        assert set(files) == {'requirements.txt', 'README.md', '.gitignore', 'app.py'}
        assert files['README.md'].startswith('# my-game')
        assert 'unity-lfs-bypasser' in files['requirements.txt']
        assert 'from server.main import main' in files['app.py']

    def test_write_skeleton(self, tmp_path):
        write_skeleton(tmp_path)

        assert (tmp_path / '.gitignore').read_text().startswith('__pycache__/')
        compile((tmp_path / 'app.py').read_text(), 'app.py', 'exec')
