"""Project-wide constants (chunk size, cache TTL, file naming)."""

CHUNK_SIZE_BYTES: int = 50 * 1024 * 1024  # 50 MiB default chunk size

DEFAULT_THRESHOLD_MB: int = 100

CACHE_TTL_MS: int = 30 * 60 * 1000  # 30 minutes

MANIFEST_SUFFIX = ".manifest.json"
CHUNK_INFIX = ".chunk."

PUBLIC_DIR_NAME = "public"
CHUNKS_DIR_NAME = "chunks"

DEFAULT_OUTPUT_DIR = "./lfs-bypasser-server"
DEFAULT_PORT = 3000

WASM_MEDIA_TYPE = "application/wasm"
OCTET_STREAM_MEDIA_TYPE = "application/octet-stream"
JAVASCRIPT_MEDIA_TYPE = "application/javascript"
