"""Shared pytest fixtures."""

import pytest
import pytest_asyncio
from helpers import FakeDatabase, make_investor
from httpx import ASGITransport, AsyncClient

from portal.app import App
from portal.config import Config
from portal.web.server import create_fastapi_app


@pytest.fixture
def config():
    return Config(database_url="mongodb://localhost:27017/portal_test", environment="production")


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def investor(database):
    """An active DII investor stored in the identity collection."""
    record = make_investor()
    database.get_collection("investors").docs.append(record.to_mongo())
    return record


@pytest.fixture
def admin(database):
    record = make_investor(investor_id="INV-ADMIN", name="Admin", email="admin@example.com", is_admin=True)
    database.get_collection("investors").docs.append(record.to_mongo())
    return record


@pytest_asyncio.fixture
async def portal_app(config, database):
    app = App(config, database)
    async with app.lifespan():
        yield app


@pytest_asyncio.fixture
async def client(portal_app, config):
    """Async httpx client using ASGI transport, acting as one browser with a cookie jar."""
    fastapi_app = create_fastapi_app(portal_app, config)
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="https://testserver") as ac:
        yield ac
