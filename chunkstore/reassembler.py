"""Rebuilds an original file from its manifest and chunk files."""

import logging
from pathlib import Path
from typing import Union

from chunkstore.checksum_validator import compute_checksum, verify_checksum
from chunkstore.chunk_storage import read_chunk
from common.exceptions import ChunkChecksumMismatchError, IntegrityError
from common.manifest import load_manifest

logger = logging.getLogger(__name__)


def reassemble(manifest_path: Union[str, Path], verify_chunks: bool = False) -> bytes:
    """
    Reassemble the original content described by a manifest.

    Each chunk is copied to the offset given by its `start` field; the order
    of files in the chunk directory plays no part. The whole-file digest is
    checked before anything is returned.

    Args:
        manifest_path: Path to a `*.manifest.json` file; chunk paths are
            resolved relative to its directory
        verify_chunks: Also check every chunk's own digest before placing it

    Returns:
        The original file content

    Raises:
        OSError: If the manifest or a chunk file cannot be read
        MalformedManifestError: If the manifest is invalid
        ChunkChecksumMismatchError: If verify_chunks is set and a chunk digest differs
        IntegrityError: If a chunk has the wrong length or the whole-file digest differs
    """
    manifest_path = Path(manifest_path)
    manifest = load_manifest(manifest_path)
    chunks_dir = manifest_path.parent

    buffer = bytearray(manifest.original_size)

    for chunk in manifest.chunks:
        data = read_chunk(chunks_dir, chunk.path)

        if len(data) != chunk.size:
            raise IntegrityError(
                f"Chunk {chunk.path} of {manifest.file_name} is {len(data)} bytes, "
                f"manifest expects {chunk.size}"
            )

        if verify_chunks and not verify_checksum(data, chunk.hash):
            raise ChunkChecksumMismatchError(
                f"Chunk {chunk.path} of {manifest.file_name} failed checksum verification"
            )

        buffer[chunk.start:chunk.end] = data

    if not verify_checksum(buffer, manifest.hash):
        actual = compute_checksum(buffer)
        raise IntegrityError(
            f"Reassembled {manifest.file_name} hash {actual} does not match manifest hash {manifest.hash}"
        )

    logger.debug(f"Reassembled {manifest.file_name} from {len(manifest.chunks)} chunk(s)")
    return bytes(buffer)
