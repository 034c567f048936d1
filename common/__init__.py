"""Shared constants, manifest model, exceptions and logging setup."""
