"""Interfaces for catalog metadata access."""

from .metadata_source import ImportedKeyRow, MetadataSource

__all__ = [
    "ImportedKeyRow",
    "MetadataSource",
]
