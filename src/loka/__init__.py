"""Loka - product-description translation assistant.

Loka sends product copy to an AI chat backend for translation into a set of
target locales, lets a reviewer edit and approve the results, and keeps a
brand-term glossary and translation history per tenant.

Key modules:

- :mod:`loka.store` - Per-tenant record store mirroring durable storage in memory
- :mod:`loka.storage` - Durable key-value backends (SQLite, in-memory)
- :mod:`loka.server` - REST API (sessions, brand terms, history, chat proxy)
- :mod:`loka.agent` - Client for the external chat agent
- :mod:`loka.translation` - Prompt building, response parsing, approval, analytics
- :mod:`loka.client` - HTTP client for the Loka REST API
"""

__version__ = "0.1.0"
