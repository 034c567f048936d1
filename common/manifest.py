"""Manifest model binding a set of chunk files back to one original file.

The manifest is the on-disk contract between the splitter and the
reassembler. It is serialized as JSON next to the chunk files, under the name
`<fileName>.manifest.json`.
"""

import json
import os
import re
import tempfile
from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from common.constants import MANIFEST_SUFFIX
from common.exceptions import MalformedManifestError

HEX_DIGEST_PATTERN = re.compile(r'^[0-9a-f]{64}$')


def _check_digest(value: str) -> str:
    if not HEX_DIGEST_PATTERN.match(value):
        raise ValueError("must be a 64-character lowercase hex SHA-256 digest")
    return value


class ChunkDescriptor(BaseModel):
    """Placement and digest of one chunk file."""
    model_config = ConfigDict(frozen=True)

    path: str
    start: int = Field(ge=0)
    size: int = Field(ge=0)
    hash: str

    @field_validator('path')
    @classmethod
    def path_is_bare_name(cls, value: str) -> str:
        if not value or value in ('.', '..') or '/' in value or '\\' in value:
            raise ValueError(f"chunk path must be a bare file name, got {value!r}")
        return value

    @field_validator('hash')
    @classmethod
    def hash_is_hex_digest(cls, value: str) -> str:
        return _check_digest(value)

    @property
    def end(self) -> int:
        return self.start + self.size


class Manifest(BaseModel):
    """
    Descriptor of one chunked file.

    Chunk order is placement order as written by the splitter. Validation
    only requires that, sorted by `start`, the chunks tile
    `[0, original_size)` exactly.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_name: str = Field(alias='fileName', min_length=1)
    original_size: int = Field(alias='originalSize', ge=0)
    hash: str
    chunks: List[ChunkDescriptor]

    @field_validator('hash')
    @classmethod
    def hash_is_hex_digest(cls, value: str) -> str:
        return _check_digest(value)

    @model_validator(mode='after')
    def chunks_tile_original(self) -> 'Manifest':
        total = sum(chunk.size for chunk in self.chunks)
        if total != self.original_size:
            raise ValueError(
                f"chunk sizes sum to {total} bytes, expected originalSize={self.original_size}"
            )

        offset = 0
        for chunk in sorted(self.chunks, key=lambda c: c.start):
            if chunk.start != offset:
                raise ValueError(
                    f"chunk {chunk.path} starts at {chunk.start}, expected {offset} (gap or overlap)"
                )
            offset = chunk.end
        return self

    def to_json(self) -> str:
        """Serialize with the on-disk field names."""
        return json.dumps(self.model_dump(by_alias=True), indent=2)


def manifest_name_for(file_name: str) -> str:
    """
    Get manifest file name for a logical file name.

    Args:
        file_name: Base name of the original file (e.g. "Build.data")

    Returns:
        Manifest file name (e.g. "Build.data.manifest.json")
    """
    return f"{file_name}{MANIFEST_SUFFIX}"


def manifest_path_for(chunks_dir: Union[str, Path], file_name: str) -> Path:
    """Get the manifest location for a logical file inside a chunk directory."""
    return Path(chunks_dir) / manifest_name_for(file_name)


def load_manifest(manifest_path: Union[str, Path]) -> Manifest:
    """
    Read and validate a manifest file.

    Args:
        manifest_path: Path to a `*.manifest.json` file

    Returns:
        Validated Manifest

    Raises:
        OSError: If the file cannot be read
        MalformedManifestError: If the content is not a valid manifest
    """
    raw = Path(manifest_path).read_bytes()
    try:
        return Manifest.model_validate_json(raw.decode('utf-8'))
    except (UnicodeDecodeError, ValidationError) as e:
        raise MalformedManifestError(f"Invalid manifest {manifest_path}: {e}") from e


def save_manifest(manifest: Manifest, chunks_dir: Union[str, Path]) -> Path:
    """
    Atomically publish a manifest into the chunk directory.

    The content is written to a temporary file in the same directory and
    renamed into place, so readers only ever observe a complete manifest.

    Args:
        manifest: Manifest to persist
        chunks_dir: Directory holding the chunk files

    Returns:
        Path of the written manifest

    Raises:
        OSError: If write operation fails
    """
    target = manifest_path_for(chunks_dir, manifest.file_name)
    fd, tmp_name = tempfile.mkstemp(dir=str(target.parent), prefix='.manifest-', suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(manifest.to_json())
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return target
