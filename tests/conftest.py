"""Shared test fixtures for the Navboard store and server tests."""

import pytest

from nav_server import create_app
from pkg.navboard.config import NavConfig
from pkg.navboard.kv import MemoryKV
from pkg.navboard.store import NavStore

TOKEN = "test-admin-token"


@pytest.fixture
def kv():
    return MemoryKV()


@pytest.fixture
def store(kv):
    return NavStore(kv, seed_groups=["work", "tools"])


@pytest.fixture
def app(store):
    cfg = NavConfig(admin_token=TOKEN, use_memory=True)
    return create_app(cfg, store=store)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth():
    return {"Authorization": f"Bearer {TOKEN}"}
