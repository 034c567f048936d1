"""SHA-256 digests binding chunk files and whole files to their manifest."""

import hashlib


def compute_checksum(data: bytes) -> str:
    """Lowercase hex SHA-256 of a chunk window or a reassembled buffer."""
    return hashlib.sha256(data).hexdigest()


def verify_checksum(data: bytes, expected: str) -> bool:
    """
    Check content against the digest a manifest records for it.

    Used for each chunk when reassembly verifies chunks, and for the whole
    reassembled buffer every time.

    Args:
        data: Chunk bytes or the reassembled file
        expected: Hex digest from the manifest (compared case-insensitively)

    Returns:
        True if the content matches the recorded digest
    """
    return compute_checksum(data) == expected.lower()


class IncrementalChecksumCalculator:
    """
    Whole-file digest built up while the splitter reads windows.

    The splitter feeds every window it writes as a chunk, so the original
    file is read only once for both per-chunk and whole-file digests.
    """

    def __init__(self):
        self._hasher = hashlib.sha256()
        self._finalized = False
        self._bytes_seen = 0

    @property
    def bytes_seen(self) -> int:
        """Total number of bytes fed so far, i.e. the original size once done."""
        return self._bytes_seen

    def update(self, window: bytes) -> None:
        """
        Feed the next window of the original file.

        Raises:
            ValueError: If called after finalize()
        """
        if self._finalized:
            raise ValueError("Cannot update after finalization")
        self._hasher.update(window)
        self._bytes_seen += len(window)

    def finalize(self) -> str:
        """Return the hex digest recorded as the manifest's whole-file hash."""
        self._finalized = True
        return self._hasher.hexdigest()
