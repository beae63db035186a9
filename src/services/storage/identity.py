"""
Device Identity

Each installation gets one opaque identifier, created on first use and
kept until the user explicitly resets it. The remote store partitions
snapshots by this identifier.

Identity must never block the caller: if local storage is unavailable we
fall back to an identifier that lives only as long as this process.
"""

import secrets
import string
import time
from typing import Optional

import structlog

from src.services.storage.interface import (
    DEVICE_ID_KEY,
    KeyValueStoreInterface,
    LocalPersistenceError,
)


logger = structlog.get_logger(__name__)

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase


def generate_device_id() -> str:
    """Create an ID like device_1718000000000_k3j9x0a2b."""
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(9))
    return f"device_{millis}_{suffix}"


class DeviceIdentityProvider:
    """Issues and persists the per-installation device ID."""

    def __init__(self, kv_store: KeyValueStoreInterface):
        self._kv = kv_store
        self._ephemeral_id: Optional[str] = None

    def _ephemeral(self) -> str:
        if self._ephemeral_id is None:
            self._ephemeral_id = generate_device_id()
        return self._ephemeral_id

    def get_or_create(self) -> str:
        """Return the persisted ID, creating and saving one if needed."""
        try:
            device_id = self._kv.get(DEVICE_ID_KEY)
            if device_id:
                return device_id
            device_id = generate_device_id()
            self._kv.set(DEVICE_ID_KEY, device_id)
            logger.info("device_id_created", device_id=device_id)
            return device_id
        except LocalPersistenceError as e:
            device_id = self._ephemeral()
            logger.warning(
                "device_id_storage_unavailable",
                error=str(e),
                ephemeral_device_id=device_id,
            )
            return device_id

    def reset(self) -> str:
        """Forget the current ID and return a freshly persisted one."""
        self._ephemeral_id = None
        try:
            self._kv.delete(DEVICE_ID_KEY)
        except LocalPersistenceError as e:
            logger.warning("device_id_reset_failed", error=str(e))
        return self.get_or_create()
