"""
Configuration management for the n-gram graph engine.

Provides centralized configuration for graph construction, edge
caching, similarity and storage with sensible defaults and validation.
"""

import os
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ngramgraph.core.exceptions import ConfigurationError

POLICY_NAMES = ("plain", "symmetric", "gaussian", "gaussian_symmetric")
PROJECTION_NAMES = ("random", "sign_consistent", "positive")


@dataclass
class GraphConfig:
    """Configuration for n-gram graph construction."""

    # Smallest and largest n-gram size, inclusive
    min_size: int = 3
    max_size: int = 3

    # Correlation window, in tokens
    window: int = 3

    # Window policy (plain, symmetric, gaussian, gaussian_symmetric)
    policy: str = "plain"

    # Gaussian deviation; None means "use the window"
    sigma: Optional[float] = None


@dataclass
class CacheConfig:
    """Configuration for the per-graph edge locator cache."""

    # Maximum number of cached source vertices
    max_size: int = 1000


@dataclass
class SimilarityConfig:
    """Configuration for similarity analysis."""

    # Lines scoring below this overall similarity are dropped by rank
    similarity_threshold: float = 0.0

    # Number of results returned by rank (0 = all)
    top_k: int = 0


@dataclass
class ProjectionConfig:
    """Configuration for sparse random projection."""

    # Alphabet used to index n-grams, in index order
    alphabet: str = "ACGT"

    # N-gram size the projection is built for
    rank: int = 3

    # Dimension of the projected space
    target_dim: int = 64

    # Projection type (random, sign_consistent, positive)
    projection: str = "random"

    # Seed for the projection matrix (None = nondeterministic)
    random_state: Optional[int] = None


@dataclass
class StorageConfig:
    """Configuration for graph storage."""

    # Base directory for storage
    storage_dir: str = "./data/graphs"

    # Prefix prepended to every stored file name
    prefix: str = ""

    # Enable compression for stored graphs
    enable_compression: bool = True


@dataclass
class EngineConfig:
    """Master configuration combining all engine settings."""

    graph: GraphConfig = field(default_factory=GraphConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    similarity: SimilarityConfig = field(default_factory=SimilarityConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    # Enable verbose logging
    verbose: bool = False

    def validate(self) -> None:
        """
        Check every setting and fail fast on the first invalid one.

        Raises:
            ConfigurationError: If a setting is out of range.
        """
        validate_graph_params(
            self.graph.min_size, self.graph.max_size, self.graph.window, self.graph.sigma
        )
        if self.graph.policy not in POLICY_NAMES:
            raise ConfigurationError(
                f"Unknown window policy: {self.graph.policy}",
                details={"allowed": list(POLICY_NAMES)},
            )
        if self.cache.max_size < 1:
            raise ConfigurationError(f"Cache size must be positive, got {self.cache.max_size}")
        if self.projection.projection not in PROJECTION_NAMES:
            raise ConfigurationError(f"Unknown projection type: {self.projection.projection}")
        if self.projection.rank < 1 or self.projection.target_dim < 1:
            raise ConfigurationError("Projection rank and target dimension must be positive")
        if not self.projection.alphabet:
            raise ConfigurationError("Projection alphabet cannot be empty")


def validate_graph_params(
    min_size: int, max_size: int, window: int, sigma: Optional[float] = None
) -> None:
    """
    Validate n-gram graph construction parameters.

    Raises:
        ConfigurationError: If any parameter is out of range.
    """
    details = {"min_size": min_size, "max_size": max_size, "window": window}
    if min_size < 1:
        raise ConfigurationError(f"Minimum n-gram size must be positive, got {min_size}", details)
    if max_size < min_size:
        raise ConfigurationError(
            f"Maximum n-gram size {max_size} is smaller than minimum {min_size}", details
        )
    if window < 1:
        raise ConfigurationError(f"Correlation window must be positive, got {window}", details)
    if sigma is not None and sigma <= 0:
        raise ConfigurationError(f"Gaussian sigma must be positive, got {sigma}", details)


class Config:
    """
    Central configuration manager providing access to all settings.

    Supports loading from environment variables, a ``.env`` file and
    JSON configuration files.
    """

    _instance: Optional["Config"] = None
    _config: EngineConfig = None

    ENV_PREFIX = "NGG_"

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = EngineConfig()
        return cls._instance

    @classmethod
    def get(cls) -> EngineConfig:
        """Get the current engine configuration."""
        if cls._instance is None:
            cls()
        return cls._instance._config

    @classmethod
    def reset(cls) -> EngineConfig:
        """Restore the default configuration."""
        instance = cls()
        instance._config = EngineConfig()
        return instance._config

    @classmethod
    def load_from_file(cls, config_path: str) -> EngineConfig:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file.

        Returns:
            Loaded EngineConfig instance.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigurationError: If the file holds invalid settings.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r") as f:
            data = json.load(f)

        config = cls._dict_to_config(data)
        config.validate()

        instance = cls()
        instance._config = config
        return instance._config

    @classmethod
    def load_from_env(cls, dotenv_path: Optional[str] = None) -> EngineConfig:
        """
        Load configuration from environment variables.

        Variables are prefixed with NGG_. A ``.env`` file is read first;
        variables already present in the environment take precedence.

        Args:
            dotenv_path: Optional explicit path to a ``.env`` file.

        Returns:
            EngineConfig with environment overrides applied.
        """
        load_dotenv(dotenv_path=dotenv_path, override=False)

        instance = cls()
        config = instance._config
        prefix = cls.ENV_PREFIX

        try:
            if os.getenv(f"{prefix}MIN_SIZE"):
                config.graph.min_size = int(os.getenv(f"{prefix}MIN_SIZE"))

            if os.getenv(f"{prefix}MAX_SIZE"):
                config.graph.max_size = int(os.getenv(f"{prefix}MAX_SIZE"))

            if os.getenv(f"{prefix}WINDOW"):
                config.graph.window = int(os.getenv(f"{prefix}WINDOW"))

            if os.getenv(f"{prefix}SIGMA"):
                config.graph.sigma = float(os.getenv(f"{prefix}SIGMA"))

            if os.getenv(f"{prefix}CACHE_SIZE"):
                config.cache.max_size = int(os.getenv(f"{prefix}CACHE_SIZE"))

            if os.getenv(f"{prefix}TARGET_DIM"):
                config.projection.target_dim = int(os.getenv(f"{prefix}TARGET_DIM"))

            if os.getenv(f"{prefix}RANDOM_STATE"):
                config.projection.random_state = int(os.getenv(f"{prefix}RANDOM_STATE"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric environment setting: {e}") from e

        if os.getenv(f"{prefix}POLICY"):
            config.graph.policy = os.getenv(f"{prefix}POLICY").lower()

        if os.getenv(f"{prefix}ALPHABET"):
            config.projection.alphabet = os.getenv(f"{prefix}ALPHABET")

        if os.getenv(f"{prefix}STORAGE_DIR"):
            config.storage.storage_dir = os.getenv(f"{prefix}STORAGE_DIR")

        if os.getenv(f"{prefix}VERBOSE"):
            config.verbose = os.getenv(f"{prefix}VERBOSE").lower() in ("true", "1", "yes")

        config.validate()
        return config

    @staticmethod
    def _dict_to_config(data: dict) -> EngineConfig:
        """Convert a dictionary to EngineConfig."""
        config = EngineConfig()

        try:
            if "graph" in data:
                config.graph = GraphConfig(**data["graph"])

            if "cache" in data:
                config.cache = CacheConfig(**data["cache"])

            if "similarity" in data:
                config.similarity = SimilarityConfig(**data["similarity"])

            if "projection" in data:
                config.projection = ProjectionConfig(**data["projection"])

            if "storage" in data:
                config.storage = StorageConfig(**data["storage"])
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration key: {e}") from e

        if "verbose" in data:
            config.verbose = data["verbose"]

        return config

    @classmethod
    def save_to_file(cls, config_path: str) -> None:
        """
        Save current configuration to a JSON file.

        Args:
            config_path: Path to save the configuration file.
        """
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = cls._config_to_dict(cls.get())

        with open(config_path, "w") as f:
            json.dump(data, f, indent=2)

    @staticmethod
    def _config_to_dict(config: EngineConfig) -> dict:
        """Convert EngineConfig to a dictionary."""
        return asdict(config)
