"""
Document storage and serialized document mutation.
"""

from .queue import DocumentMutationQueue
from .storage import (
    DocumentStorage,
    FileSystemStorage,
    MemoryStorage,
    join_lines,
    split_lines,
)

__all__ = [
    "DocumentMutationQueue",
    "DocumentStorage",
    "FileSystemStorage",
    "MemoryStorage",
    "join_lines",
    "split_lines",
]
