"""Storage layer — file-backed post documents and ID sequences.

Each store owns the lock for the files it manages; no code path holds
both the post lock and the sequence lock in opposite orders.
"""

from filedb.storage.post_store import POST_SEQUENCE, PostStore
from filedb.storage.sequence import SequenceGenerator

__all__ = [
    "POST_SEQUENCE",
    "PostStore",
    "SequenceGenerator",
]
