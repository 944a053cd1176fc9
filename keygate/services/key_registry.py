"""
Key Registry for Keygate - issues time-limited access keys with a per-user cooldown
"""

import asyncio
import logging
from typing import Callable, Optional, Tuple

from ..models.key_record import KeyRecord, STATUS_EXPIRED
from ..models.registry import Registry, RegistryStats
from ..models.results import GeneratedKey, ValidationResult, CooldownStatus, KeyListing
from ..utils.clock import now_ms
from ..utils.errors import ValidationError, CooldownActiveError, KeyGenerationError
from ..utils.key_generator import generate_access_key
from .registry_storage import RegistryStorage, JsonFileRegistryStorage


logger = logging.getLogger(__name__)

# 18 hours in milliseconds
COOLDOWN_MS = 18 * 60 * 60 * 1000

MAX_KEY_ATTEMPTS = 5


def recompute_status(registry: Registry, now: int) -> Registry:
    """
    Cleanup pass: reclassify every key as active or expired and recount

    Updates the registry in place and returns it. Expiry times and the key set
    are never touched, so repeated passes at the same time are no-ops.

    Args:
        registry: Registry to reclassify
        now: Current time, epoch milliseconds

    Returns:
        The same registry
    """
    active_count = 0
    expired_count = 0

    for record in registry.keys.values():
        if record.refresh_status(now) == STATUS_EXPIRED:
            expired_count += 1
        else:
            active_count += 1

    registry.stats.active_keys = active_count
    registry.stats.expired_keys = expired_count
    return registry


def cooldown_status(registry: Registry, user_id: str, now: int) -> CooldownStatus:
    """
    Compute whether a user may generate a key at the given time

    Args:
        registry: Registry holding the user's last generation time
        user_id: User to check
        now: Current time, epoch milliseconds

    Returns:
        CooldownStatus for the user
    """
    last_generation = registry.last_generation.get(user_id)
    if last_generation is None:
        return CooldownStatus(can_generate=True, remaining_time=0)

    elapsed = now - last_generation
    return CooldownStatus(
        can_generate=elapsed >= COOLDOWN_MS,
        remaining_time=max(0, COOLDOWN_MS - elapsed),
        last_generation=last_generation,
        next_generation_time=last_generation + COOLDOWN_MS
    )


def _require(value: Optional[str], message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value


class KeyRegistry:
    """
    Stateful key registry backed by a RegistryStorage

    Every operation reloads the full registry, mutates it in memory and saves it
    back. Storage I/O runs in a worker thread, off the event loop. The
    load-mutate-save sequence runs under one lock per registry, so concurrent
    requests within a process cannot overwrite each other's updates.
    """

    def __init__(self, storage: RegistryStorage = None,
                 clock: Callable[[], int] = None,
                 key_factory: Callable[[], str] = None):
        """
        Initialize KeyRegistry with storage, clock and key source

        Args:
            storage: Registry storage (JSON file at the configured path if None)
            clock: Callable returning the current time in epoch milliseconds
            key_factory: Callable returning a new random key string
        """
        self.storage = storage or JsonFileRegistryStorage()
        self.clock = clock or now_ms
        self.key_factory = key_factory or generate_access_key
        self._lock = asyncio.Lock()

    async def _refresh(self) -> Tuple[Registry, int]:
        """Load, run the cleanup pass and save. Caller must hold the lock."""
        registry = await asyncio.to_thread(self.storage.load)
        now = self.clock()
        recompute_status(registry, now)
        await asyncio.to_thread(self.storage.save, registry)
        return registry, now

    def _new_unique_key(self, registry: Registry) -> str:
        for attempt in range(1, MAX_KEY_ATTEMPTS + 1):
            key = self.key_factory()
            if key not in registry.keys:
                return key
            logger.warning(f"Generated key collided with an existing key (attempt {attempt})")

        raise KeyGenerationError(f"Could not generate an unused key after {MAX_KEY_ATTEMPTS} attempts")

    async def generate(self, user_id: str) -> GeneratedKey:
        """
        Issue a new key to a user, subject to the cooldown

        Args:
            user_id: User requesting the key

        Returns:
            The new key with its creation and expiry times

        Raises:
            ValidationError: If user_id is missing
            CooldownActiveError: If the user generated a key less than COOLDOWN_MS ago
            KeyGenerationError: If no unused key could be generated
            RegistryStorageError: If the registry cannot be loaded or saved
        """
        user_id = _require(user_id, "User ID required")

        async with self._lock:
            registry = await asyncio.to_thread(self.storage.load)
            now = self.clock()

            status = cooldown_status(registry, user_id, now)
            if not status.can_generate:
                logger.warning(
                    f"Rejected key generation for {user_id}: cooldown active for another {status.remaining_time} ms"
                )
                raise CooldownActiveError(
                    user_id=user_id,
                    remaining_time=status.remaining_time,
                    next_generation_time=status.next_generation_time
                )

            record = KeyRecord.create_new(key=self._new_unique_key(registry), user_id=user_id, created=now)
            registry.keys[record.key] = record
            registry.last_generation[user_id] = now
            registry.stats.total_generated += 1
            registry.stats.active_keys += 1

            recompute_status(registry, now)
            await asyncio.to_thread(self.storage.save, registry)

        logger.info(f"Generated key for {user_id}, expires at {record.expiry}")
        return GeneratedKey(key=record.key, created=record.created, expiry=record.expiry)

    async def validate(self, key: str) -> ValidationResult:
        """
        Check whether a key exists and is still active

        Runs the cleanup pass (and saves) first, so the answer reflects the
        current time rather than a stale stored status.

        Args:
            key: Key to check

        Returns:
            ValidationResult; unknown and expired keys are negative results, not errors

        Raises:
            ValidationError: If key is missing
            RegistryStorageError: If the registry cannot be loaded or saved
        """
        key = _require(key, "Key required")

        async with self._lock:
            registry, now = await self._refresh()

        record = registry.keys.get(key)
        if record is None:
            logger.debug("Validation failed: key not found")
            return ValidationResult.not_found(key)

        if record.is_expired(now):
            logger.debug(f"Validation failed: key for {record.user_id} expired at {record.expiry}")
            return ValidationResult.expired(record)

        return ValidationResult.active(record, now)

    async def list_keys(self) -> KeyListing:
        """Return every key (after a cleanup pass) with a stats snapshot"""
        async with self._lock:
            registry, _ = await self._refresh()

        logger.debug(f"Listed {len(registry.keys)} keys")
        return KeyListing(keys=registry.keys, stats=registry.stats)

    async def get_stats(self) -> RegistryStats:
        """Return the stats snapshot after a cleanup pass"""
        async with self._lock:
            registry, _ = await self._refresh()

        return registry.stats

    async def check_cooldown(self, user_id: str) -> CooldownStatus:
        """
        Report whether a user may generate a key now

        Read-only: no cleanup pass and nothing is saved.

        Args:
            user_id: User to check

        Returns:
            CooldownStatus for the user

        Raises:
            ValidationError: If user_id is missing
            RegistryStorageError: If the registry cannot be loaded
        """
        user_id = _require(user_id, "User ID required")

        async with self._lock:
            registry = await asyncio.to_thread(self.storage.load)
            now = self.clock()

        return cooldown_status(registry, user_id, now)
