"""Tests for the chunk-aware delivery handler."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from chunkstore.splitter import ChunkSplitter
from common.exceptions import ChunkChecksumMismatchError, IntegrityError, MalformedManifestError
from server import delivery as delivery_module
from server.delivery import (
    ChunkedDeliveryHandler,
    ChunkedResponse,
    FallThrough,
    media_type_for,
    requested_file_name,
)
from server.reassembly_cache import ReassemblyCache


@pytest.fixture
def handler(chunks_dir):
    return ChunkedDeliveryHandler(chunks_dir, ReassemblyCache())


class TestHelpers:
    """Path and content type helpers."""

    @pytest.mark.parametrize("name,expected", [
        ('game.wasm', 'application/wasm'),
        ('game.data', 'application/octet-stream'),
        ('game.bundle', 'application/octet-stream'),
    ])
    def test_media_type_for(self, name, expected):
        assert media_type_for(name) == expected

    @pytest.mark.parametrize("path,expected", [
        ('/Build/game.data', 'game.data'),
        ('/game.wasm', 'game.wasm'),
        ('/Build/my game.data', 'my game.data'),
        ('/Build/my%20game.data', 'my%20game.data'),
        ('/', ''),
    ])
    def test_requested_file_name(self, path, expected):
        assert requested_file_name(path) == expected

    def test_manifest_path_uses_base_name(self, handler, chunks_dir):
        assert handler.manifest_path('/Build/deep/game.data') == chunks_dir / 'game.data.manifest.json'

    @pytest.mark.parametrize("path", ['/', '/Build/', '/..'])
    def test_manifest_path_for_directory_like_paths(self, handler, path):
        assert handler.manifest_path(path) is None


class TestAttempt:
    """Two-outcome chunked delivery attempt."""

    def test_no_manifest_falls_through(self, handler):
        outcome = handler.attempt('/Build/loader.js')

        assert isinstance(outcome, FallThrough)
        assert outcome.reason == 'no manifest'

    def test_no_manifest_does_not_consult_cache(self, chunks_dir):
        cache = Mock(spec=ReassemblyCache)
        handler = ChunkedDeliveryHandler(chunks_dir, cache)

        handler.attempt('/index.html')

        cache.get.assert_not_called()

    def test_chunked_file_served(self, handler, make_file, chunks_dir):
        source = make_file('game.wasm', 2500)
        ChunkSplitter(1024).split(source, chunks_dir)

        outcome = handler.attempt('/Build/game.wasm')

        assert isinstance(outcome, ChunkedResponse)
        assert outcome.buffer == source.read_bytes()
        assert outcome.media_type == 'application/wasm'
        assert outcome.file_name == 'game.wasm'

    def test_integrity_failure_falls_through_and_logs(self, chunks_dir, monkeypatch):
        (chunks_dir / 'game.data.manifest.json').write_text('{}')
        cache = Mock(spec=ReassemblyCache)
        cache.get.side_effect = IntegrityError("hash mismatch")
        mock_logger = Mock()
        monkeypatch.setattr(delivery_module, 'logger', mock_logger)

        outcome = ChunkedDeliveryHandler(chunks_dir, cache).attempt('/game.data')

        assert isinstance(outcome, FallThrough)
        assert 'hash mismatch' in outcome.reason
        mock_logger.error.assert_called_once()

    def test_missing_chunk_falls_through(self, handler, make_file, chunks_dir):
        source = make_file('game.data', 2500)
        manifest = ChunkSplitter(1024).split(source, chunks_dir)
        (chunks_dir / manifest.chunks[1].path).unlink()

        outcome = handler.attempt('/game.data')

        assert isinstance(outcome, FallThrough)

    def test_manifest_directory_is_not_a_manifest(self, handler, chunks_dir):
        (chunks_dir / 'odd.data.manifest.json').mkdir()

        assert isinstance(handler.attempt('/odd.data'), FallThrough)

    def test_overlong_name_falls_through(self, handler):
        outcome = handler.attempt('/Build/' + 'a' * 300 + '.data')

        assert isinstance(outcome, FallThrough)
        assert outcome.reason == 'no manifest'

    def test_manifest_lookup_error_falls_through(self, chunks_dir, monkeypatch):
        cache = Mock(spec=ReassemblyCache)
        handler = ChunkedDeliveryHandler(chunks_dir, cache)

        def denied(self):
            raise PermissionError("permission denied")

        monkeypatch.setattr(Path, 'is_file', denied)

        outcome = handler.attempt('/game.data')

        assert isinstance(outcome, FallThrough)
        cache.get.assert_not_called()

    @pytest.mark.parametrize("error", [
        MalformedManifestError("bad manifest"),
        ChunkChecksumMismatchError("chunk digest differs"),
        FileNotFoundError("chunk missing"),
        PermissionError("chunk unreadable"),
    ])
    def test_cache_failures_fall_through(self, chunks_dir, error):
        (chunks_dir / 'game.data.manifest.json').write_text('{}')
        cache = Mock(spec=ReassemblyCache)
        cache.get.side_effect = error

        outcome = ChunkedDeliveryHandler(chunks_dir, cache).attempt('/game.data')

        assert isinstance(outcome, FallThrough)
        assert str(error) in outcome.reason

    def test_non_utf8_manifest_falls_through(self, handler, chunks_dir):
        (chunks_dir / 'game.data.manifest.json').write_bytes(b'\xff\xfe{not utf8')

        outcome = handler.attempt('/game.data')

        assert isinstance(outcome, FallThrough)
        assert outcome.reason.startswith('chunked delivery failed')
