"""Builds a servable project: stage files, split large ones, write skeleton."""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from chunkstore.large_file_finder import find_large_files
from chunkstore.splitter import ChunkSplitter
from cli.skeleton import write_skeleton
from common.constants import CHUNK_SIZE_BYTES, CHUNKS_DIR_NAME, PUBLIC_DIR_NAME
from common.utils import format_file_size

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_DIRS = ('node_modules', PUBLIC_DIR_NAME, CHUNKS_DIR_NAME, '.git', '__pycache__', '.venv')


@dataclass
class BuildReport:
    """Outcome of a project build."""

    output_dir: Path
    split_files: List[Tuple[str, int]] = field(default_factory=list)
    failed_files: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failed_files


def copy_tree(source: Path, target: Path, exclude_dirs: Iterable[str]) -> int:
    """
    Recursively copy a directory, skipping excluded directory names.

    Args:
        source: Directory or file to copy
        target: Destination path
        exclude_dirs: Directory base names that are not copied

    Returns:
        Number of files copied
    """
    excluded = set(exclude_dirs)
    if source.is_dir():
        if source.name in excluded:
            return 0
        target.mkdir(parents=True, exist_ok=True)
        copied = 0
        for entry in sorted(source.iterdir()):
            copied += copy_tree(entry, target / entry.name, excluded)
        return copied

    if source.is_file():
        shutil.copy2(source, target)
        return 1
    return 0


def build_project(
    source_dir: Union[str, Path],
    output_dir: Union[str, Path],
    threshold_bytes: int,
    chunk_size: int = CHUNK_SIZE_BYTES,
    keep_originals: bool = False,
) -> BuildReport:
    """
    Stage a build tree and split its large files into chunks.

    Layout produced under output_dir:
        public/   copy of source_dir, minus large originals
        chunks/   chunk files and manifests
        requirements.txt, README.md, .gitignore, app.py

    A file that fails to split is logged and reported; the remaining files
    are still processed.

    Args:
        source_dir: Directory containing the build to serve
        output_dir: Project directory to create
        threshold_bytes: Files larger than this are split
        chunk_size: Chunk size in bytes
        keep_originals: Leave split originals in public/

    Returns:
        BuildReport listing split and failed files
    """
    source = Path(source_dir).resolve()
    output = Path(output_dir).resolve()
    public_dir = output / PUBLIC_DIR_NAME
    chunks_dir = output / CHUNKS_DIR_NAME

    logger.info(f"Creating server project in: {output}")
    public_dir.mkdir(parents=True, exist_ok=True)
    chunks_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Copying build files...")
    exclude = DEFAULT_EXCLUDE_DIRS + (output.name,)
    copied = 0
    for entry in sorted(source.iterdir()):
        if entry.resolve() == output:
            continue
        copied += copy_tree(entry, public_dir / entry.name, exclude)
    logger.info(f"Copied {copied} file(s) to {public_dir}")

    report = BuildReport(output_dir=output)

    logger.info("Searching for large files...")
    large_files = find_large_files(public_dir, threshold_bytes)
    if not large_files:
        logger.info("No large files found that need splitting.")
    else:
        logger.info(f"Found {len(large_files)} large file(s) to split.")

    splitter = ChunkSplitter(chunk_size)
    seen_names = set()
    for file_path in large_files:
        if file_path.name in seen_names:
            # Manifests are looked up by base name, so a second file with the
            # same name would overwrite the first one's chunk set.
            logger.error(f"Skipping {file_path}: another file named {file_path.name} was already split")
            report.failed_files.append((file_path.name, "duplicate file name"))
            continue
        seen_names.add(file_path.name)

        logger.info(f"Splitting {file_path.name} ({format_file_size(file_path.stat().st_size)})...")
        try:
            manifest = splitter.split(file_path, chunks_dir)
        except OSError as e:
            logger.error(f"Error splitting {file_path.name}: {e}", exc_info=True)
            report.failed_files.append((file_path.name, str(e)))
            continue

        report.split_files.append((manifest.file_name, len(manifest.chunks)))
        logger.info(f"Split {file_path.name} into {len(manifest.chunks)} chunk(s)")

        if not keep_originals:
            file_path.unlink()
            logger.debug(f"Removed original {file_path}")

    write_skeleton(output)
    logger.info("Project files generated")
    return report
