"""Exception classes shared by the chunk store and the server."""


class ChunkStoreError(Exception):
    """
    Base exception class for chunk store errors.
    """
    pass


class IntegrityError(ChunkStoreError):
    """
    Raised when reassembled content does not match its manifest.
    """
    pass


class ChunkChecksumMismatchError(IntegrityError):
    """
    Raised when a single chunk's digest differs from its descriptor.
    """
    pass


class MalformedManifestError(IntegrityError):
    """
    Raised when a manifest file cannot be parsed or violates its invariants.
    """
    pass
