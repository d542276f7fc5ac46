"""Test fixtures: an app over a fresh InMemoryStore per test.

Learn: create_app() accepts its store and settings, so tests never touch
a database file unless they ask for one (see sql_store). bcrypt rounds are
lowered to keep password hashing fast.

ASGITransport doesn't run the lifespan; with an explicit store there is
nothing to start anyway.
"""

import logging

import pytest
import pytest_asyncio
import structlog
from httpx import ASGITransport, AsyncClient

from opendydns.auth.identity import UserIdentity
from opendydns.auth.service import AuthService
from opendydns.config import Settings
from opendydns.db.engine import create_engine, create_session_factory, init_models
from opendydns.main import create_app
from opendydns.services.alias_service import AliasRegistry
from opendydns.store.memory import InMemoryStore
from opendydns.store.sql import SqlStore

TEST_SECRET = "test-signing-key-0123456789abcdef-0123456789"
ALICE_PASSWORD = "alice-password-123"
BOB_PASSWORD = "bob-password-456"


@pytest.fixture(autouse=True, scope="session")
def quiet_logs():
    """Only warnings and errors; CLI tests read stdout."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING)
    )


@pytest.fixture()
def settings():
    return Settings(
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        domains=["example.com", "dyn.example.org"],
    )


@pytest.fixture()
def store():
    return InMemoryStore()


@pytest.fixture()
def auth_service(store):
    return AuthService(store, bcrypt_rounds=4)


@pytest.fixture()
def registry(store):
    return AliasRegistry(store, available_domains=["example.com"])


@pytest_asyncio.fixture()
async def sql_store(tmp_path):
    """SqlStore over a throwaway SQLite file."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'opendydns.db'}")
    await init_models(engine)
    try:
        yield SqlStore(create_session_factory(engine))
    finally:
        await engine.dispose()


@pytest.fixture()
def app(settings, store):
    return create_app(settings, store=store)


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def alice(app) -> UserIdentity:
    return await app.state.auth.create_user("alice@example.com", ALICE_PASSWORD)


@pytest_asyncio.fixture()
async def bob(app) -> UserIdentity:
    return await app.state.auth.create_user("bob@example.com", BOB_PASSWORD)


def bearer(app, identity: UserIdentity) -> dict:
    """Authorization header for identity, signed with the app's codec."""
    token = app.state.codec.issue(identity).token
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def alice_headers(app, alice):
    return bearer(app, alice)


@pytest.fixture()
def bob_headers(app, bob):
    return bearer(app, bob)
