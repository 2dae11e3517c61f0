import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from mergeboard.app import create_app
from mergeboard.core import build_engine, use_engine
from mergeboard.services import readiness
from mergeboard.services.readiness import ReadinessGuard
from mergeboard.services.schema import provision_schema


@pytest.fixture()
def engine(monkeypatch):
    # Fresh in-memory database and a readiness guard that has never passed.
    test_engine = build_engine("sqlite://", echo=False)
    provision_schema(test_engine)
    use_engine(test_engine)
    monkeypatch.setattr(readiness, "_guard", ReadinessGuard())
    yield test_engine
    use_engine(None)
    test_engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture()
def app():
    return create_app()


@pytest.fixture()
def client(app, engine):
    return TestClient(app)


@pytest.fixture()
def submit(client):
    def _submit(nickname, score, **extra):
        body = {"nickname": nickname, "score": score, **extra}
        return client.post("/scores", json=body)

    return _submit
