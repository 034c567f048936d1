"""Configuration settings for the chunk-aware file server."""

import os
from common.constants import CACHE_TTL_MS, CHUNKS_DIR_NAME, DEFAULT_PORT, PUBLIC_DIR_NAME


SERVER_ROOT = os.environ.get("LFS_SERVER_ROOT", os.getcwd())

PUBLIC_DIR = os.environ.get("LFS_PUBLIC_DIR", os.path.join(SERVER_ROOT, PUBLIC_DIR_NAME))

CHUNKS_DIR = os.environ.get("LFS_CHUNKS_DIR", os.path.join(SERVER_ROOT, CHUNKS_DIR_NAME))

SERVER_HOST = os.environ.get("LFS_HOST", "0.0.0.0")

SERVER_PORT = int(os.environ.get("PORT", str(DEFAULT_PORT)))

CACHE_TTL = int(os.environ.get("LFS_CACHE_TTL_MS", str(CACHE_TTL_MS)))
