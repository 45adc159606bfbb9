"""ASGI entry point for running the loka server via uvicorn CLI.

    python -m uvicorn loka.server.asgi:app --host ... --port ...
"""

from loka.config.loader import load_config
from loka.server.app import create_app

config = load_config()
app = create_app(config)
