"""Per-tenant record store.

Components:

- :class:`AppController` - Sessions, brand terms and history for one tenant
- :class:`ControllerRegistry` - Hands out one controller per tenant id
"""

from loka.store.controller import AppController, PersistenceError
from loka.store.registry import ControllerRegistry

__all__ = ["AppController", "ControllerRegistry", "PersistenceError"]
