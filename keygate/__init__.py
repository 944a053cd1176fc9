"""
Keygate - time-limited access keys with a per-user issuance cooldown
"""

from .services.key_registry import KeyRegistry
from .services.registry_storage import JsonFileRegistryStorage, InMemoryRegistryStorage

__all__ = ['KeyRegistry', 'JsonFileRegistryStorage', 'InMemoryRegistryStorage']

__version__ = "0.1.0"
