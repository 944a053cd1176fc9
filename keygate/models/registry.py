"""
Registry data model - the whole persisted key store
"""

from dataclasses import dataclass, field
from typing import Dict, Any

from .key_record import KeyRecord


@dataclass
class RegistryStats:
    """
    Aggregate counters kept alongside the keys

    Attributes:
        total_generated: Keys ever issued, never decremented
        active_keys: Keys not yet expired as of the last cleanup pass
        expired_keys: Keys expired as of the last cleanup pass
    """
    total_generated: int = 0
    active_keys: int = 0
    expired_keys: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'totalGenerated': self.total_generated,
            'activeKeys': self.active_keys,
            'expiredKeys': self.expired_keys
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RegistryStats':
        if not isinstance(data, dict):
            raise ValueError("'stats' section must be a mapping")
        return cls(
            total_generated=int(data.get('totalGenerated', 0)),
            active_keys=int(data.get('activeKeys', 0)),
            expired_keys=int(data.get('expiredKeys', 0))
        )


@dataclass
class Registry:
    """
    All issued keys, the last generation time per user, and aggregate stats

    Attributes:
        keys: Key string -> KeyRecord
        last_generation: User ID -> epoch milliseconds of their latest issuance
        stats: Aggregate counters
    """
    keys: Dict[str, KeyRecord] = field(default_factory=dict)
    last_generation: Dict[str, int] = field(default_factory=dict)
    stats: RegistryStats = field(default_factory=RegistryStats)

    @classmethod
    def empty(cls) -> 'Registry':
        """Registry used on first run: empty maps and zeroed stats"""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted layout"""
        return {
            'keys': {key: record.to_dict() for key, record in self.keys.items()},
            'lastGeneration': dict(self.last_generation),
            'stats': self.stats.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Registry':
        """
        Create Registry from the persisted layout

        Raises:
            ValueError: If a section is missing or has the wrong shape, or a key record is invalid
        """
        if not isinstance(data, dict):
            raise ValueError("Registry data must be a mapping")

        for section in ('keys', 'lastGeneration', 'stats'):
            if section not in data:
                raise ValueError(f"Registry data is missing '{section}'")

        keys_raw = data['keys']
        last_generation_raw = data['lastGeneration']
        if not isinstance(keys_raw, dict):
            raise ValueError("'keys' section must be a mapping")
        if not isinstance(last_generation_raw, dict):
            raise ValueError("'lastGeneration' section must be a mapping")

        keys = {}
        for key, record_raw in keys_raw.items():
            record = KeyRecord.from_dict(key, record_raw)
            if not record.validate():
                raise ValueError(f"Key record for {key} is invalid")
            keys[key] = record

        return cls(
            keys=keys,
            last_generation={user_id: int(ts) for user_id, ts in last_generation_raw.items()},
            stats=RegistryStats.from_dict(data['stats'])
        )
