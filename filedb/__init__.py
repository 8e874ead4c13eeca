"""FileDB — blog-post backend on plain JSON files.

Each post is one JSON document on disk, IDs come from a persisted
sequence file, and unreferenced editor images are reclaimed by a
mark-and-sweep collector.
"""

__version__ = "0.1.0"
