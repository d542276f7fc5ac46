"""opendydnsd: run the daemon and provision accounts.

Usage:
    opendydnsd serve                      # Start the HTTP API
    opendydnsd create-user bob@example.com
"""

import asyncio
import sys

import click
import structlog
import uvicorn

from opendydns import __version__
from opendydns.auth.service import AuthService
from opendydns.config import Settings
from opendydns.db.engine import create_engine, create_session_factory, init_models
from opendydns.errors import DydnsError
from opendydns.log import configure_logging
from opendydns.main import create_app
from opendydns.store.sql import SqlStore

logger = structlog.get_logger()


@click.group()
@click.version_option(version=__version__, prog_name="opendydnsd")
@click.option("--log-level", default=None, help="Override OPENDYDNS_LOG_LEVEL")
@click.pass_context
def main(ctx: click.Context, log_level):
    """OpenDyDNS daemon."""
    settings = Settings()
    if log_level:
        settings.log_level = log_level
    configure_logging(settings.log_level, json=settings.log_json)
    ctx.obj = settings


@main.command()
@click.option("--host", default=None, help="Bind address (default: OPENDYDNS_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: OPENDYDNS_PORT)")
@click.pass_obj
def serve(settings: Settings, host, port):
    """Start the HTTP API."""
    app = create_app(settings)
    uvicorn.run(
        app,
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level,
    )


@main.command("create-user")
@click.argument("email")
@click.password_option()
@click.pass_obj
def create_user(settings: Settings, email: str, password: str):
    """Provision an account."""
    try:
        identity = asyncio.run(_create_user(settings, email, password))
    except DydnsError as e:
        click.secho(f"Error: {e.message}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"Created user {identity.email} ({identity.user_id})", fg="green")


async def _create_user(settings: Settings, email: str, password: str):
    engine = create_engine(settings.database_url)
    try:
        await init_models(engine)
        store = SqlStore(create_session_factory(engine))
        auth = AuthService(store, bcrypt_rounds=settings.bcrypt_rounds)
        return await auth.create_user(email, password)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    main()
