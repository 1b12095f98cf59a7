"""Short-lived key-value storage used by the rate limiter."""
import logging
import time
from abc import ABC, abstractmethod
from threading import Lock
from typing import Any, Callable, Dict, Optional, Tuple

from route_creator.core.config import Settings, settings
from route_creator.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class TransientStore(ABC):
    """Key-value store whose entries expire after a time-to-live."""

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the stored value, or None if missing or expired."""

    @abstractmethod
    def set(self, key: str, value: Dict[str, Any], ttl: int) -> None:
        """Store ``value`` for ``ttl`` seconds."""

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class MemoryStore(TransientStore):
    """In-process store. Only suitable for a single worker."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._items: Dict[str, Tuple[float, Dict[str, Any]]] = {}
        self._lock = Lock()
        self._clock = clock

    def __len__(self) -> int:
        return len(self._items)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None

            expires_at, value = item
            if expires_at <= self._clock():
                del self._items[key]
                return None
            return dict(value)

    def set(self, key: str, value: Dict[str, Any], ttl: int) -> None:
        with self._lock:
            self._items[key] = (self._clock() + ttl, dict(value))

    def delete(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


def get_transient_store(config: Optional[Settings] = None) -> TransientStore:
    """Build the store selected by ``TRANSIENT_STORE``."""
    config = config or settings

    if config.transient_store == "memory":
        return MemoryStore()

    if config.transient_store == "dynamodb":
        from route_creator.db.dynamodb import DynamoDBClient, DynamoDBTransientStore

        logger.info("Using DynamoDB table %s for transient data", config.dynamodb_transient_table)
        return DynamoDBTransientStore(
            DynamoDBClient(config), table_name=config.dynamodb_transient_table
        )

    raise ConfigurationError(f"Unknown transient store: {config.transient_store!r}")
