"""
Core data models for Keygate
"""

from .key_record import KeyRecord, KEY_TTL_MS, STATUS_ACTIVE, STATUS_EXPIRED
from .registry import Registry, RegistryStats
from .results import GeneratedKey, ValidationResult, ValidationReason, CooldownStatus, KeyListing

__all__ = [
    "KeyRecord",
    "KEY_TTL_MS",
    "STATUS_ACTIVE",
    "STATUS_EXPIRED",
    "Registry",
    "RegistryStats",
    "GeneratedKey",
    "ValidationResult",
    "ValidationReason",
    "CooldownStatus",
    "KeyListing"
]
