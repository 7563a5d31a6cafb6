"""
Storage module for persisting n-gram graphs.
"""

from ngramgraph.storage.backend import (
    ObjectStore,
    MemoryObjectStore,
    CompressedMemoryObjectStore,
    FileObjectStore,
)
from ngramgraph.storage.manager import GraphStore

__all__ = [
    "ObjectStore",
    "MemoryObjectStore",
    "CompressedMemoryObjectStore",
    "FileObjectStore",
    "GraphStore",
]
