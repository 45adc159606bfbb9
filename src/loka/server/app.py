"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from loka import __version__
from loka.agent.proxy import AgentProxy
from loka.config.schema import LokaConfig
from loka.server.errors import install_error_handlers
from loka.server.routes import create_router
from loka.store.registry import ControllerRegistry


def create_app(
    config: LokaConfig,
    registry: ControllerRegistry | None = None,
    proxy: AgentProxy | None = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: Loka configuration
        registry: Tenant record stores; defaults to SQLite at ``config.storage.path``
        proxy: Chat agent forwarder; defaults to ``config.agent.base_url``

    Returns:
        Configured FastAPI app
    """
    if registry is None:
        registry = ControllerRegistry.from_config(config.storage)
    if proxy is None:
        proxy = AgentProxy(config.agent.base_url, timeout=config.agent.timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await proxy.close()

    app = FastAPI(
        title="Loka",
        description="Product-description translation assistant",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)
    app.include_router(create_router(config, registry, proxy))
    app.state.registry = registry

    return app
