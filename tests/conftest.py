import os
from datetime import datetime, timedelta

# Set environment BEFORE importing the app so the engine binds to memory.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["OTP_ECHO_IN_RESPONSE"] = "1"

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app


class FakeClock:
    def __init__(self, start=datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class ScriptedRng:
    """Stands in for random.SystemRandom with a fixed list of draws."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        return self.values.pop(0)


@pytest.fixture(autouse=True)
def _reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
