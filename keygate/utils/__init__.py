"""
Utility functions and helpers for Keygate
"""

from .clock import now_ms, to_iso
from .errors import (
    KeygateError,
    ValidationError,
    CooldownActiveError,
    KeyGenerationError,
    RegistryStorageError
)
from .key_generator import ALPHABET, KEY_LENGTH, generate_access_key

__all__ = [
    'now_ms', 'to_iso',
    'KeygateError', 'ValidationError', 'CooldownActiveError', 'KeyGenerationError', 'RegistryStorageError',
    'ALPHABET', 'KEY_LENGTH', 'generate_access_key'
]
