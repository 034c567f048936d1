"""CLI constants and output styling."""

from common.constants import CHUNK_SIZE_BYTES

PROG_NAME = "lfs-bypasser"

DESCRIPTION = "Split large files of a WebGL build into chunks and create a server project for it"

DEFAULT_CHUNK_SIZE_MB = CHUNK_SIZE_BYTES // (1024 * 1024)

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
RESET = "\033[0m"
