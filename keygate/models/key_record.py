"""
KeyRecord data model for issued access keys
"""

from dataclasses import dataclass
from typing import Dict, Any

from ..utils.clock import to_iso


STATUS_ACTIVE = "active"
STATUS_EXPIRED = "expired"

# 18 hours in milliseconds
KEY_TTL_MS = 18 * 60 * 60 * 1000


@dataclass
class KeyRecord:
    """
    Represents an access key issued to a user

    Attributes:
        key: The key string itself (also the registry map key)
        user_id: User the key was issued to
        created: Creation time, epoch milliseconds
        expiry: Expiry time, epoch milliseconds (created + KEY_TTL_MS)
        status: Last status computed by a cleanup pass, active or expired
        created_date: ISO-8601 rendering of created
    """
    key: str
    user_id: str
    created: int
    expiry: int
    status: str = STATUS_ACTIVE
    created_date: str = ""

    @classmethod
    def create_new(cls, key: str, user_id: str, created: int) -> 'KeyRecord':
        """Create a new active KeyRecord expiring KEY_TTL_MS after created"""
        return cls(
            key=key,
            user_id=user_id,
            created=created,
            expiry=created + KEY_TTL_MS,
            status=STATUS_ACTIVE,
            created_date=to_iso(created)
        )

    def validate(self) -> bool:
        """Validate the KeyRecord instance"""
        if not self.key or not isinstance(self.key, str):
            return False
        if not self.user_id or not isinstance(self.user_id, str):
            return False
        if not isinstance(self.created, int) or not isinstance(self.expiry, int):
            return False
        if self.expiry <= self.created:
            return False
        if self.status not in (STATUS_ACTIVE, STATUS_EXPIRED):
            return False
        return True

    def is_expired(self, now: int) -> bool:
        """Check whether the key has reached its expiry at the given time"""
        return self.expiry <= now

    def refresh_status(self, now: int) -> str:
        """Recompute status from expiry and the given time"""
        self.status = STATUS_EXPIRED if self.is_expired(now) else STATUS_ACTIVE
        return self.status

    def remaining_time(self, now: int) -> int:
        """Milliseconds until expiry, zero once expired"""
        return max(0, self.expiry - now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted/wire representation (the key itself is the map key)"""
        return {
            'userId': self.user_id,
            'created': self.created,
            'expiry': self.expiry,
            'status': self.status,
            'createdDate': self.created_date or to_iso(self.created)
        }

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> 'KeyRecord':
        """Create KeyRecord from its persisted representation"""
        if not isinstance(data, dict):
            raise ValueError(f"Key record for {key} must be a mapping")

        created = int(data['created'])
        return cls(
            key=key,
            user_id=data['userId'],
            created=created,
            expiry=int(data['expiry']),
            status=data.get('status', STATUS_ACTIVE),
            created_date=data.get('createdDate') or to_iso(created)
        )
