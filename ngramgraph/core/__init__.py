"""
Core module containing configuration and the exception hierarchy.
"""

from ngramgraph.core.config import (
    Config,
    EngineConfig,
    GraphConfig,
    CacheConfig,
    SimilarityConfig,
    ProjectionConfig,
    StorageConfig,
    validate_graph_params,
)
from ngramgraph.core.exceptions import (
    NGramGraphError,
    ConfigurationError,
    GraphConstructionError,
    AlgebraError,
    EncodingError,
    SimilarityError,
    ProjectionError,
    StorageError,
    IngestionError,
)

__all__ = [
    "Config",
    "EngineConfig",
    "GraphConfig",
    "CacheConfig",
    "SimilarityConfig",
    "ProjectionConfig",
    "StorageConfig",
    "validate_graph_params",
    "NGramGraphError",
    "ConfigurationError",
    "GraphConstructionError",
    "AlgebraError",
    "EncodingError",
    "SimilarityError",
    "ProjectionError",
    "StorageError",
    "IngestionError",
]
