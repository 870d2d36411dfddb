"""Shared fixtures and configuration for pytest."""

import json
import os
import sys
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database import init_db
from providers.base import BaseProvider
from services.store import Store
from services.user_service import get_demo_user


class FakeProvider(BaseProvider):
    """Deterministic structured-output provider.

    ``reply`` is either a fixed payload or a callable taking the user message
    and returning a payload. A payload may be a dict (encoded as JSON), a raw
    string, or an Exception instance, which makes the call fail.
    """

    def __init__(self, reply=None):
        self.reply = reply if reply is not None else {}
        self.calls: list[dict] = []

    @property
    def name(self) -> str:
        return "fake"

    async def structured(self, messages: list[dict], schema: dict, model: str | None = None) -> dict:
        user_message = messages[-1]["content"]
        self.calls.append({"messages": messages, "schema": schema, "model": model})
        payload = self.reply(user_message) if callable(self.reply) else self.reply

        if isinstance(payload, Exception):
            return {"text": None, "provider": self.name, "model": model, "status": "failed", "error": str(payload)}
        text = payload if isinstance(payload, str) else json.dumps(payload)
        return {"text": text, "provider": self.name, "model": model or "fake-model", "status": "success", "error": None}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return Store(db)


@pytest.fixture
async def user(store):
    return await get_demo_user(store)


@pytest.fixture
def now():
    return datetime(2026, 3, 10, 12, 0, 0)


@pytest.fixture
def provider_factory():
    return FakeProvider
