"""
Error taxonomy for Keygate - shared by the key registry and the HTTP layer
"""

from typing import Dict, Any


class KeygateError(Exception):
    """Base class for all Keygate errors"""


class ValidationError(KeygateError, ValueError):
    """Raised when a required request field (userId or key) is missing"""


class CooldownActiveError(KeygateError):
    """
    Raised when a user asks for a new key before their cooldown window has elapsed

    Attributes:
        user_id: User that requested the key
        remaining_time: Milliseconds left until the user may generate again
        next_generation_time: Epoch milliseconds at which the cooldown ends
    """

    def __init__(self, user_id: str, remaining_time: int, next_generation_time: int):
        super().__init__("Cooldown active")
        self.user_id = user_id
        self.remaining_time = remaining_time
        self.next_generation_time = next_generation_time

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the 429 response body"""
        return {
            "success": False,
            "error": str(self),
            "remainingTime": self.remaining_time,
            "nextGenerationTime": self.next_generation_time
        }


class KeyGenerationError(KeygateError, RuntimeError):
    """Raised when no unused key could be generated within the retry budget"""


class RegistryStorageError(KeygateError, RuntimeError):
    """Raised when the registry store cannot be read, parsed or written"""
