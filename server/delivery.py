"""Chunk-aware delivery: serve reassembled files, otherwise fall through."""

import logging
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Literal, Optional, Union

from common.constants import OCTET_STREAM_MEDIA_TYPE, WASM_MEDIA_TYPE
from common.exceptions import ChunkStoreError
from common.manifest import manifest_path_for
from common.utils import format_file_size
from server.reassembly_cache import ReassemblyCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChunkedResponse:
    """Reassembled file ready to be written as the response body."""

    file_name: str
    buffer: bytes
    media_type: str
    outcome: Literal["chunked"] = "chunked"


@dataclass(frozen=True)
class FallThrough:
    """Request left to ordinary static delivery."""

    reason: str
    outcome: Literal["fall-through"] = "fall-through"


DeliveryOutcome = ChunkedResponse | FallThrough


def media_type_for(file_name: str) -> str:
    """
    Get the response content type for a chunked file.

    `.wasm` is served as WebAssembly; `.data` and every other extension as
    generic binary.
    """
    if file_name.endswith('.wasm'):
        return WASM_MEDIA_TYPE
    return OCTET_STREAM_MEDIA_TYPE


def requested_file_name(request_path: str) -> str:
    """
    Base name of an already percent-decoded URL path.

    Returns '' for directory-like paths.
    """
    if request_path.endswith('/'):
        return ''
    return PurePosixPath(request_path).name


class ChunkedDeliveryHandler:
    """
    Decides per request between chunked delivery and static delivery.

    A request is chunked when `<chunks_dir>/<basename>.manifest.json`
    exists. Failures while reassembling never escape: they are logged and
    turned into a FallThrough, so a broken chunk set ends up as whatever
    static delivery answers (normally 404).
    """

    def __init__(self, chunks_dir: Union[str, Path], cache: ReassemblyCache):
        self.chunks_dir = Path(chunks_dir)
        self.cache = cache

    def manifest_path(self, request_path: str) -> Optional[Path]:
        """Expected manifest location for a request path, None if it names no file."""
        file_name = requested_file_name(request_path)
        if not file_name or file_name in ('.', '..'):
            return None
        return manifest_path_for(self.chunks_dir, file_name)

    @staticmethod
    def _manifest_exists(manifest_path: Path) -> bool:
        # Names the filesystem cannot hold (e.g. ENAMETOOLONG) have no manifest either
        try:
            return manifest_path.is_file()
        except OSError as e:
            logger.debug(f"Manifest lookup failed for {manifest_path.name[:64]}: {e}")
            return False

    def attempt(self, request_path: str) -> DeliveryOutcome:
        """
        Try to serve a request path from its chunk set.

        Blocking: reads manifest and chunk files on a cache miss.

        Args:
            request_path: URL path of the request (e.g. "/Build/game.data")

        Returns:
            ChunkedResponse on success, FallThrough otherwise
        """
        manifest_path = self.manifest_path(request_path)
        if manifest_path is None or not self._manifest_exists(manifest_path):
            return FallThrough(reason="no manifest")

        file_name = requested_file_name(request_path)
        start_time = time.time()
        logger.info(f"[Request] Chunked file requested: {file_name}")

        try:
            buffer = self.cache.get(manifest_path)
        except (OSError, ChunkStoreError) as e:
            logger.error(f"[Error] Failed to serve chunked file {file_name}: {e}", exc_info=True)
            return FallThrough(reason=f"chunked delivery failed: {e}")

        duration = time.time() - start_time
        logger.info(
            f"[Success] Served {file_name} ({format_file_size(len(buffer))}) in {duration:.3f}s"
        )
        return ChunkedResponse(
            file_name=file_name,
            buffer=buffer,
            media_type=media_type_for(file_name),
        )
