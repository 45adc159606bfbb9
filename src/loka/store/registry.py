"""One record-store controller per tenant."""

import logging
import threading
import time
from collections.abc import Callable

from loka.config.schema import StorageConfig
from loka.storage.kv import KeyValueStore, SQLiteKeyValueStore
from loka.store.controller import AppController

logger = logging.getLogger(__name__)


class ControllerRegistry:
    """Creates each tenant's controller on first use and reuses it afterwards."""

    def __init__(
        self,
        store_factory: Callable[[str], KeyValueStore],
        clock: Callable[[], float] = time.time,
    ):
        """Initialize registry.

        Args:
            store_factory: Builds the durable namespace for a tenant id
            clock: Clock handed to every controller
        """
        self._store_factory = store_factory
        self._clock = clock
        self._controllers: dict[str, AppController] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: StorageConfig) -> "ControllerRegistry":
        """Build a registry whose tenants live in one SQLite database."""
        return cls(lambda tenant: SQLiteKeyValueStore(config.path, namespace=tenant))

    def get(self, tenant: str) -> AppController:
        with self._lock:
            controller = self._controllers.get(tenant)
            if controller is None:
                logger.info("Creating record store for tenant %s", tenant)
                controller = AppController(self._store_factory(tenant), clock=self._clock)
                self._controllers[tenant] = controller
            return controller

    def tenants(self) -> list[str]:
        with self._lock:
            return sorted(self._controllers)
