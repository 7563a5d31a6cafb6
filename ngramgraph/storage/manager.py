"""
Named n-gram graph persistence.

Serializes graphs to JSON blobs and keeps them in an ObjectStore under
a single category, with a small cache of recently loaded graphs.
"""

import logging
from typing import Dict, List, Optional

from ngramgraph.core.config import StorageConfig
from ngramgraph.graph.ngram_graph import NGramGraph
from ngramgraph.storage import serialization
from ngramgraph.storage.backend import FileObjectStore, ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "ngg"


class GraphStore:
    """
    Saves and loads NGramGraph instances by name.

    Loaded graphs are cached; callers always receive a clone so the
    cached copy cannot be mutated through them.
    """

    def __init__(self, store: ObjectStore, category: str = DEFAULT_CATEGORY):
        self.store = store
        self.category = category
        self._graph_cache: Dict[str, NGramGraph] = {}

    @classmethod
    def from_config(cls, config: Optional[StorageConfig] = None) -> "GraphStore":
        """File-backed store configured by a StorageConfig."""
        return cls(FileObjectStore.from_config(config))

    def save_graph(self, name: str, graph: NGramGraph) -> None:
        """
        Serialize and store a graph, replacing any graph of the same name.

        Raises:
            StorageError: If the backend fails.
        """
        self.store.save(name, self.category, serialization.dumps(graph))
        self._graph_cache[name] = graph.clone()
        logger.info(f"Saved graph '{name}' ({graph.length()} edges)")

    def load_graph(self, name: str) -> NGramGraph:
        """
        Load a stored graph.

        Raises:
            StorageError: If the graph is missing or unreadable.
        """
        cached = self._graph_cache.get(name)
        if cached is None:
            cached = serialization.loads(self.store.load(name, self.category))
            self._graph_cache[name] = cached
            logger.info(f"Loaded graph '{name}'")
        return cached.clone()

    def exists(self, name: str) -> bool:
        return self.store.exists(name, self.category)

    def list_graphs(self) -> List[str]:
        return self.store.list(self.category)

    def delete_graph(self, name: str) -> bool:
        self._graph_cache.pop(name, None)
        deleted = self.store.delete(name, self.category)
        if deleted:
            logger.info(f"Deleted graph '{name}'")
        return deleted

    def clear_cache(self) -> None:
        self._graph_cache.clear()
