"""
Result types returned by the key registry operations
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional

from .key_record import KeyRecord
from .registry import RegistryStats


class ValidationReason(str, Enum):
    """Why a key failed validation; values are the texts sent to clients"""
    NOT_FOUND = "Key not found"
    EXPIRED = "Key expired"


@dataclass
class GeneratedKey:
    """A freshly issued key"""
    key: str
    created: int
    expiry: int

    def to_dict(self) -> Dict[str, Any]:
        return {'key': self.key, 'expiry': self.expiry, 'created': self.created}


@dataclass
class ValidationResult:
    """
    Outcome of validating a key

    A valid result carries created, expiry and remaining_time; an invalid one
    carries a reason and, for expired keys, expired_at.
    """
    valid: bool
    key: str
    created: Optional[int] = None
    expiry: Optional[int] = None
    remaining_time: Optional[int] = None
    reason: Optional[ValidationReason] = None
    expired_at: Optional[int] = None

    @classmethod
    def active(cls, record: KeyRecord, now: int) -> 'ValidationResult':
        return cls(
            valid=True,
            key=record.key,
            created=record.created,
            expiry=record.expiry,
            remaining_time=record.expiry - now
        )

    @classmethod
    def expired(cls, record: KeyRecord) -> 'ValidationResult':
        return cls(valid=False, key=record.key, reason=ValidationReason.EXPIRED, expired_at=record.expiry)

    @classmethod
    def not_found(cls, key: str) -> 'ValidationResult':
        return cls(valid=False, key=key, reason=ValidationReason.NOT_FOUND)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response body fields"""
        if self.valid:
            return {
                'valid': True,
                'key': self.key,
                'created': self.created,
                'expiry': self.expiry,
                'remainingTime': self.remaining_time
            }

        data = {'valid': False, 'reason': self.reason.value}
        if self.expired_at is not None:
            data['expiredAt'] = self.expired_at
        return data


@dataclass
class CooldownStatus:
    """Whether a user may generate a key now, and when they next may"""
    can_generate: bool
    remaining_time: int
    last_generation: Optional[int] = None
    next_generation_time: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'canGenerate': self.can_generate, 'remainingTime': self.remaining_time}
        # Users who never generated get the short form
        if self.last_generation is not None:
            data['lastGeneration'] = self.last_generation
            data['nextGenerationTime'] = self.next_generation_time
        return data


@dataclass
class KeyListing:
    """Every key in the registry plus a stats snapshot"""
    keys: Dict[str, KeyRecord]
    stats: RegistryStats

    def to_dict(self) -> Dict[str, Any]:
        return {
            'keys': {key: record.to_dict() for key, record in self.keys.items()},
            'stats': self.stats.to_dict()
        }
