"""Finds files above a size threshold in a staged build tree."""

import logging
from pathlib import Path
from typing import List, Union

from common.constants import CHUNKS_DIR_NAME
from common.utils import format_file_size

logger = logging.getLogger(__name__)


def find_large_files(directory: Union[str, Path], threshold_bytes: int) -> List[Path]:
    """
    Recursively collect regular files strictly larger than a threshold.

    Directories named "chunks" are not descended into, so a previous split's
    output is never picked up again.

    Args:
        directory: Root of the tree to scan
        threshold_bytes: Files with size > threshold_bytes are returned

    Returns:
        Sorted list of matching file paths (empty if the directory is missing)
    """
    root = Path(directory)
    if not root.is_dir():
        logger.warning(f"Directory not found: {root}")
        return []

    large_files: List[Path] = []
    for entry in sorted(root.iterdir()):
        if entry.is_dir():
            if entry.name == CHUNKS_DIR_NAME:
                continue
            large_files.extend(find_large_files(entry, threshold_bytes))
        elif entry.is_file():
            size = entry.stat().st_size
            if size > threshold_bytes:
                logger.info(f"Large file found: {entry} ({format_file_size(size)})")
                large_files.append(entry)

    return sorted(large_files)
