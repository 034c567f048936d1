"""
Time-bounded in-memory cache of reassembled files.

Entries are keyed by manifest path, not by content digest: if a manifest or
its chunk files are replaced on disk while the server runs, the old buffer
keeps being served until its entry expires. Expired entries are replaced
lazily on the next lookup; there is no background sweep and no size bound.
"""

import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from chunkstore.reassembler import reassemble
from common.constants import CACHE_TTL_MS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """
    Single cache entry.

    Attributes:
        buffer: Fully reassembled file content
        timestamp: Clock reading taken when the entry was stored
    """
    buffer: bytes
    timestamp: float


class ReassemblyCache:
    """
    Thread-safe cache-through store for reassembled buffers.

    At most one reassembly runs per key at a time: concurrent misses on the
    same manifest wait for the first one and reuse its result. Misses on
    different manifests proceed in parallel. Failed reassemblies are never
    stored.
    """

    def __init__(
        self,
        ttl_ms: int = CACHE_TTL_MS,
        reassemble_fn: Callable[[str], bytes] = reassemble,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize reassembly cache.

        Args:
            ttl_ms: Entry time-to-live in milliseconds (default 30 minutes)
            reassemble_fn: Function turning a manifest path into a verified buffer
            clock: Monotonic clock returning seconds
        """
        if ttl_ms < 0:
            raise ValueError(f"ttl_ms must not be negative, got {ttl_ms}")

        self._ttl_seconds = ttl_ms / 1000.0
        self._reassemble = reassemble_fn
        self._clock = clock

        self._lock = threading.Lock()
        self._entries: Dict[str, CacheEntry] = {}
        self._key_locks: Dict[str, threading.Lock] = {}

    def get(self, manifest_path: Union[str, Path]) -> bytes:
        """
        Return the reassembled buffer for a manifest, reassembling on miss.

        Args:
            manifest_path: Path of the manifest; used verbatim as the cache key

        Returns:
            Reassembled file content

        Raises:
            OSError: If reassembly fails reading files
            ChunkStoreError: If reassembly fails verification
        """
        key = str(manifest_path)

        with self._lock:
            buffer = self._fresh_buffer(key)
            if buffer is not None:
                logger.info(f"[Cache Hit] Serving cached file for {Path(key).name}")
                return buffer
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            with self._lock:
                buffer = self._fresh_buffer(key)
            if buffer is not None:
                logger.info(f"[Cache Hit] Serving file reassembled by a concurrent request for {Path(key).name}")
                return buffer

            logger.info(f"[Cache Miss] Reassembling chunks for {Path(key).name}")
            buffer = self._reassemble(key)

            with self._lock:
                self._entries[key] = CacheEntry(buffer=buffer, timestamp=self._clock())
            return buffer

    def invalidate(self, manifest_path: Optional[Union[str, Path]] = None) -> None:
        """
        Drop cached entries.

        Args:
            manifest_path: Entry to drop; all entries are dropped when None
        """
        with self._lock:
            if manifest_path is None:
                count = len(self._entries)
                self._entries.clear()
                logger.info(f"Invalidated {count} cached file(s)")
            elif self._entries.pop(str(manifest_path), None) is not None:
                logger.info(f"Invalidated cached file for {Path(str(manifest_path)).name}")

    def _fresh_buffer(self, key: str) -> Optional[bytes]:
        """Return the entry's buffer if present and within TTL. Caller holds _lock."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp < self._ttl_seconds:
            return entry.buffer
        return None
