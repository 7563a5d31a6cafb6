"""
Custom exceptions for the n-gram graph engine.

Provides a hierarchy of exceptions for the different engine stages.
Structural violations (duplicate vertices or edges) and lookup misses
are never raised; they are reported as ``None``/``False`` return values.
"""


class NGramGraphError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str, stage: str = None, details: dict = None):
        super().__init__(message)
        self.stage = stage
        self.details = details or {}

    def __str__(self):
        base_msg = super().__str__()
        if self.stage:
            return f"[{self.stage}] {base_msg}"
        return base_msg


class ConfigurationError(NGramGraphError):
    """Raised when graph or engine parameters are invalid."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Configuration", details=details)


class GraphConstructionError(NGramGraphError):
    """Raised when an n-gram graph cannot be built from its input."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="GraphConstruction", details=details)


class AlgebraError(NGramGraphError):
    """Raised when two graphs cannot be combined."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Algebra", details=details)


class EncodingError(NGramGraphError):
    """Raised when a graph cannot be encoded."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Encoding", details=details)


class SimilarityError(NGramGraphError):
    """Raised when similarity computation fails."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Similarity", details=details)


class ProjectionError(NGramGraphError):
    """Raised when a graph cannot be projected into the reduced space."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Projection", details=details)


class StorageError(NGramGraphError):
    """Raised when storage operations fail."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Storage", details=details)


class IngestionError(NGramGraphError):
    """Raised when input lines cannot be read."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Ingestion", details=details)
