"""Splits a large file into fixed-size chunk files plus a manifest."""

import logging
from pathlib import Path
from typing import List, Union

from chunkstore.checksum_validator import IncrementalChecksumCalculator, compute_checksum
from chunkstore.chunk_storage import (
    chunk_file_name,
    ensure_chunks_directory,
    remove_unreferenced_chunks,
    write_chunk,
)
from common.constants import CHUNK_SIZE_BYTES
from common.manifest import ChunkDescriptor, Manifest, save_manifest

logger = logging.getLogger(__name__)


class ChunkSplitter:
    """
    Splits files into chunks of one fixed size.

    The chunk size is fixed per splitter instance; every file it handles is
    cut into windows of that size, the last one possibly shorter.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE_BYTES):
        """
        Initialize splitter.

        Args:
            chunk_size: Size of each chunk in bytes (default 50 MiB)

        Raises:
            ValueError: If chunk_size is not positive
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size

    def split(self, file_path: Union[str, Path], chunks_dir: Union[str, Path]) -> Manifest:
        """
        Split a file into chunk files and publish its manifest.

        Chunks are written first; the manifest is written only once every
        chunk is on disk. Chunk files left over from an earlier split of the
        same file name are removed after the new manifest is in place.

        Args:
            file_path: Path to an existing regular file
            chunks_dir: Destination directory (created if absent)

        Returns:
            The published Manifest

        Raises:
            OSError: If the source cannot be read or chunks cannot be written
        """
        source = Path(file_path)
        file_name = source.name
        chunks_path = ensure_chunks_directory(chunks_dir)

        whole_file = IncrementalChecksumCalculator()
        descriptors: List[ChunkDescriptor] = []

        with open(source, 'rb') as f:
            start = 0
            while True:
                window = f.read(self.chunk_size)
                if not window:
                    break

                whole_file.update(window)
                name = chunk_file_name(file_name, start, len(window))
                write_chunk(chunks_path, name, window)

                descriptors.append(ChunkDescriptor(
                    path=name,
                    start=start,
                    size=len(window),
                    hash=compute_checksum(window),
                ))
                logger.debug(f"Wrote chunk {name} ({len(window)} bytes)")
                start += len(window)

        manifest = Manifest(
            file_name=file_name,
            original_size=whole_file.bytes_seen,
            hash=whole_file.finalize(),
            chunks=descriptors,
        )
        manifest_path = save_manifest(manifest, chunks_path)
        remove_unreferenced_chunks(chunks_path, file_name, keep=[d.path for d in descriptors])

        logger.info(
            f"Split {file_name} ({manifest.original_size} bytes) into {len(descriptors)} chunk(s) "
            f"-> {manifest_path}"
        )
        return manifest


def split_file(
    file_path: Union[str, Path],
    chunks_dir: Union[str, Path],
    chunk_size: int = CHUNK_SIZE_BYTES,
) -> Manifest:
    """Split one file with a throwaway ChunkSplitter."""
    return ChunkSplitter(chunk_size).split(file_path, chunks_dir)
