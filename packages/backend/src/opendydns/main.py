"""FastAPI application factory.

create_app() builds every collaborator once (store, token codec, auth
service, authorization gate, alias registry) and hangs them on
app.state. Routes pull them back out through Depends(), so nothing is
read from module globals at request time and tests can hand in their
own store and settings.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI

from opendydns import __version__
from opendydns.api import api_router
from opendydns.api.errors import register_error_handlers
from opendydns.auth.dependencies import AuthorizationGate
from opendydns.auth.jwt import TokenCodec
from opendydns.auth.service import AuthService
from opendydns.config import Settings
from opendydns.config import settings as default_settings
from opendydns.db.engine import create_engine, create_session_factory, init_models
from opendydns.middleware.request_id import RequestIdMiddleware
from opendydns.services.alias_service import AliasRegistry
from opendydns.store.base import Store
from opendydns.store.sql import SqlStore

logger = structlog.get_logger()


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[Store] = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Without an explicit store, a SqlStore over settings.database_url is
    created; its tables are created at startup and the engine disposed at
    shutdown.
    """
    settings = settings or default_settings
    engine = None
    if store is None:
        engine = create_engine(settings.database_url, echo=settings.debug)
        store = SqlStore(create_session_factory(engine))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "opendydns.starting",
            version=__version__,
            environment=settings.environment,
            port=settings.port,
        )
        if engine is not None:
            await init_models(engine)

        yield

        logger.info("opendydns.shutdown")
        if engine is not None:
            await engine.dispose()

    app = FastAPI(
        title="OpenDyDNS",
        description="Self-hosted dynamic DNS daemon",
        version=__version__,
        lifespan=lifespan,
    )

    codec = TokenCodec(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=settings.token_ttl,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.codec = codec
    app.state.gate = AuthorizationGate(codec)
    app.state.auth = AuthService(store, bcrypt_rounds=settings.bcrypt_rounds)
    app.state.aliases = AliasRegistry(store, available_domains=settings.domains)

    app.add_middleware(RequestIdMiddleware)
    register_error_handlers(app)
    app.include_router(api_router)

    return app
