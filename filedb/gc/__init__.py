"""Orphan image garbage collection."""

from filedb.gc.collector import OrphanImageCollector
from filedb.gc.references import (
    ImageReferenceScanner,
    extract_file_name,
    extract_referenced_names,
)

__all__ = [
    "ImageReferenceScanner",
    "OrphanImageCollector",
    "extract_file_name",
    "extract_referenced_names",
]
