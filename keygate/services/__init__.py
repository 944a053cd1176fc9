"""
Core services for Keygate
"""

from .registry_storage import RegistryStorage, JsonFileRegistryStorage, InMemoryRegistryStorage
from .key_registry import KeyRegistry, recompute_status, cooldown_status, COOLDOWN_MS

__all__ = [
    'RegistryStorage', 'JsonFileRegistryStorage', 'InMemoryRegistryStorage',
    'KeyRegistry', 'recompute_status', 'cooldown_status', 'COOLDOWN_MS'
]
