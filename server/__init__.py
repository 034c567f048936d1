"""Chunk-aware HTTP file server."""
