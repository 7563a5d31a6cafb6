"""
Object store implementations.

Defines the opaque blob persistence contract used for serialized
graphs and provides in-memory and file-based implementations. Blobs
are addressed by ``(name, category)``; stores never inspect them.
"""

import gzip
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote, unquote

from ngramgraph.core.config import StorageConfig
from ngramgraph.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class ObjectStore(ABC):
    """
    Abstract base class for blob stores.

    Defines the interface for saving and retrieving named byte blobs
    grouped by category.
    """

    @abstractmethod
    def save(self, name: str, category: str, blob: bytes) -> None:
        """Store ``blob``, replacing any previous one."""
        pass

    @abstractmethod
    def load(self, name: str, category: str) -> bytes:
        """Return a stored blob; raise StorageError if absent."""
        pass

    @abstractmethod
    def exists(self, name: str, category: str) -> bool:
        """Check if a blob exists."""
        pass

    @abstractmethod
    def delete(self, name: str, category: str) -> bool:
        """Delete a blob. Returns False if it was absent."""
        pass

    @abstractmethod
    def list(self, category: str) -> List[str]:
        """Names of every blob in ``category``, sorted."""
        pass


class MemoryObjectStore(ObjectStore):
    """Dictionary-backed store; contents live as long as the instance."""

    def __init__(self):
        self._blobs: Dict[Tuple[str, str], bytes] = {}

    def _encode(self, blob: bytes) -> bytes:
        return blob

    def _decode(self, blob: bytes) -> bytes:
        return blob

    def save(self, name: str, category: str, blob: bytes) -> None:
        self._blobs[(name, category)] = self._encode(bytes(blob))
        logger.debug(f"Stored {name}.{category} in memory")

    def load(self, name: str, category: str) -> bytes:
        try:
            return self._decode(self._blobs[(name, category)])
        except KeyError:
            raise StorageError(f"Object not found: {name}.{category}") from None

    def exists(self, name: str, category: str) -> bool:
        return (name, category) in self._blobs

    def delete(self, name: str, category: str) -> bool:
        return self._blobs.pop((name, category), None) is not None

    def list(self, category: str) -> List[str]:
        return sorted(name for name, cat in self._blobs if cat == category)


class CompressedMemoryObjectStore(MemoryObjectStore):
    """In-memory store keeping blobs gzip-compressed."""

    def _encode(self, blob: bytes) -> bytes:
        return gzip.compress(blob)

    def _decode(self, blob: bytes) -> bytes:
        return gzip.decompress(blob)


class FileObjectStore(ObjectStore):
    """
    One file per blob under a base directory.

    Files are named ``prefix + quoted name + "." + category`` and
    gzip-compressed unless compression is disabled.
    """

    def __init__(self, base_dir: str = "./", prefix: str = "", compress: bool = True):
        self.base_dir = Path(base_dir)
        self.prefix = prefix
        self.compress = compress
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create storage directory {self.base_dir}: {e}") from e

    @classmethod
    def from_config(cls, config: Optional[StorageConfig] = None) -> "FileObjectStore":
        config = config or StorageConfig()
        return cls(config.storage_dir, config.prefix, config.enable_compression)

    def path_for(self, name: str, category: str) -> Path:
        return self.base_dir / f"{self.prefix}{quote(name, safe='')}.{category}"

    def save(self, name: str, category: str, blob: bytes) -> None:
        path = self.path_for(name, category)
        tmp_path = path.with_name(path.name + ".tmp")
        data = gzip.compress(blob) if self.compress else bytes(blob)
        try:
            with open(tmp_path, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Failed to save {name}.{category}: {e}") from e
        logger.debug(f"Saved {name}.{category} to {path}")

    def load(self, name: str, category: str) -> bytes:
        path = self.path_for(name, category)
        if not path.exists():
            raise StorageError(f"Object not found: {name}.{category}", details={"path": str(path)})
        try:
            with open(path, "rb") as f:
                data = f.read()
            return gzip.decompress(data) if self.compress else data
        except (OSError, EOFError) as e:
            raise StorageError(f"Failed to load {name}.{category}: {e}") from e

    def exists(self, name: str, category: str) -> bool:
        return self.path_for(name, category).exists()

    def delete(self, name: str, category: str) -> bool:
        path = self.path_for(name, category)
        if not path.exists():
            return False
        try:
            path.unlink()
            return True
        except OSError as e:
            logger.error(f"Failed to delete {name}.{category}: {e}")
            return False

    def list(self, category: str) -> List[str]:
        suffix = f".{category}"
        names = []
        for path in self.base_dir.iterdir():
            file_name = path.name
            if not path.is_file() or not file_name.startswith(self.prefix) or not file_name.endswith(suffix):
                continue
            names.append(unquote(file_name[len(self.prefix):-len(suffix)]))
        return sorted(names)
