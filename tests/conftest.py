import pytest
from fastapi.testclient import TestClient

from app import database, main, seed


@pytest.fixture
def database_url(tmp_path):
    return "sqlite:///%s" % (tmp_path / "registration.db")


@pytest.fixture
def db(database_url):
    database.init_db(database_url)
    session = database.SessionLocal()
    seed.seed_courses(session)
    try:
        yield session
    finally:
        session.close()
        database.engine.dispose()


@pytest.fixture
def client(database_url, monkeypatch):
    monkeypatch.setattr(main, "DATABASE_URL", database_url)
    monkeypatch.setattr(main, "RABBITMQ_URL", "")
    with TestClient(main.app) as c:
        yield c
    database.engine.dispose()


@pytest.fixture
def student():
    return {"studentId": "S1", "studentName": "Ada Lovelace", "email": "ada@example.com", "courseId": 1}


@pytest.fixture
def other_db(db):
    # a second, independent session on the same database
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()
