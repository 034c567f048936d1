"""Chunk splitting, reassembly and large-file scanning."""
