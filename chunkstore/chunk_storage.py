"""Manages physical chunk files inside a chunk directory."""

import logging
from pathlib import Path
from typing import Iterable, List, Union

from common.constants import CHUNK_INFIX

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def ensure_chunks_directory(chunks_dir: PathLike) -> Path:
    """Ensure chunks directory exists and return it as a Path."""
    path = Path(chunks_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def chunk_file_name(file_name: str, start: int, size: int) -> str:
    """
    Build the self-describing name of a chunk file.

    Args:
        file_name: Base name of the original file
        start: Byte offset of the chunk within the original file
        size: Length of the chunk in bytes

    Returns:
        Name in the form "<file_name>.chunk.<start>-<end>"
    """
    return f"{file_name}{CHUNK_INFIX}{start}-{start + size}"


def get_chunk_path(chunks_dir: PathLike, name: str) -> Path:
    """Get file path for a chunk file name."""
    return Path(chunks_dir) / name


def write_chunk(chunks_dir: PathLike, name: str, data: bytes) -> Path:
    """
    Write chunk data to disk.

    Args:
        chunks_dir: Directory holding chunk files
        name: Chunk file name
        data: Raw chunk bytes, no header or framing

    Returns:
        Path to written file

    Raises:
        OSError: If write operation fails
    """
    filepath = get_chunk_path(chunks_dir, name)
    filepath.write_bytes(data)
    return filepath


def read_chunk(chunks_dir: PathLike, name: str) -> bytes:
    """
    Read entire chunk from disk.

    Raises:
        FileNotFoundError: If chunk does not exist
        OSError: If read operation fails
    """
    return get_chunk_path(chunks_dir, name).read_bytes()


def list_chunks_for(chunks_dir: PathLike, file_name: str) -> List[str]:
    """
    List chunk file names belonging to one logical file.

    Returns:
        Sorted chunk file names, empty if the directory does not exist
    """
    directory = Path(chunks_dir)
    if not directory.exists():
        return []

    prefix = f"{file_name}{CHUNK_INFIX}"
    return sorted(
        p.name for p in directory.iterdir()
        if p.is_file() and p.name.startswith(prefix)
    )


def remove_unreferenced_chunks(chunks_dir: PathLike, file_name: str, keep: Iterable[str]) -> List[str]:
    """
    Delete chunk files of a logical file that are not in `keep`.

    Used after a re-split publishes a new manifest, so chunks of the previous
    split do not linger next to it.

    Returns:
        Names of the removed chunk files
    """
    keep_set = set(keep)
    removed = []
    for name in list_chunks_for(chunks_dir, file_name):
        if name in keep_set:
            continue
        get_chunk_path(chunks_dir, name).unlink()
        removed.append(name)

    if removed:
        logger.info(f"Removed {len(removed)} stale chunk(s) of {file_name}")
    return removed
