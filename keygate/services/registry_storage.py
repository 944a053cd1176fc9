"""
Registry storage for Keygate - loads and saves the whole registry in one piece
Ships a JSON file backend (production) and an in-memory backend (tests, embedding)
"""

import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from ..config.settings import get_db_file
from ..models.registry import Registry
from ..utils.errors import RegistryStorageError


logger = logging.getLogger(__name__)


class RegistryStorage(ABC):
    """
    Storage port for the key registry
    Every registry operation loads the full registry and saves it back
    """
    
    @abstractmethod
    def load(self) -> Registry:
        """
        Load the full registry
        
        Raises:
            RegistryStorageError: If the store cannot be read or parsed
        """
    
    @abstractmethod
    def save(self, registry: Registry) -> None:
        """
        Replace the stored registry with the given one
        
        Raises:
            RegistryStorageError: If the store cannot be written
        """


class JsonFileRegistryStorage(RegistryStorage):
    """
    Keeps the registry in a single pretty-printed JSON file
    Each save replaces the whole file through a temp file and os.replace
    """
    
    def __init__(self, path: Optional[str] = None):
        """
        Initialize JSON file storage, creating the file on first run
        
        Args:
            path: Registry file path. Defaults to the configured KEYGATE_DB_FILE
        """
        self.path = Path(path or get_db_file())
        self._init_database()
    
    def _init_database(self) -> None:
        """Write an empty registry if the file does not exist yet"""
        if self.path.exists():
            return
        
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create registry directory {self.path.parent}: {e}")
            raise RegistryStorageError(f"Cannot create registry directory {self.path.parent}: {e}") from e
        
        self.save(Registry.empty())
        logger.info(f"Initialized empty key registry at {self.path}")
    
    def load(self) -> Registry:
        try:
            with self.path.open('r', encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read key registry {self.path}: {e}")
            raise RegistryStorageError(f"Cannot read key registry {self.path}: {e}") from e
        
        try:
            return Registry.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Key registry {self.path} is corrupt: {e}")
            raise RegistryStorageError(f"Key registry {self.path} is corrupt: {e}") from e
    
    def save(self, registry: Registry) -> None:
        payload = json.dumps(registry.to_dict(), indent=2)
        directory = self.path.parent
        
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=f".{self.path.name}.", suffix=".tmp")
        except OSError as e:
            logger.error(f"Failed to write key registry {self.path}: {e}")
            raise RegistryStorageError(f"Cannot write key registry {self.path}: {e}") from e
        
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                fh.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error(f"Failed to write key registry {self.path}: {e}")
            raise RegistryStorageError(f"Cannot write key registry {self.path}: {e}") from e


class InMemoryRegistryStorage(RegistryStorage):
    """
    Keeps the registry as a detached copy of its persisted layout
    Loads and saves go through the same to_dict/from_dict path as the file backend
    """
    
    def __init__(self, registry: Optional[Registry] = None):
        self._data: Dict[str, Any] = (registry or Registry.empty()).to_dict()
        self.load_count = 0
        self.save_count = 0
    
    def load(self) -> Registry:
        self.load_count += 1
        return Registry.from_dict(copy.deepcopy(self._data))
    
    def save(self, registry: Registry) -> None:
        self.save_count += 1
        self._data = copy.deepcopy(registry.to_dict())
    
    def snapshot(self) -> Dict[str, Any]:
        """Copy of the currently stored layout"""
        return copy.deepcopy(self._data)
