"""
Shared pytest fixtures for the bookstore test suite.

mongomock provides an in-memory MongoDB so every test starts from an
isolated database.
"""
import os
import sys

import mongomock
import pytest

_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from insert_books import BOOKS, seed_collection  # noqa: E402


@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture
def mongo_db(mongo_client):
    return mongo_client["plp_bookstore"]


@pytest.fixture
def books_collection(mongo_db):
    return mongo_db["books"]


@pytest.fixture
def seeded_collection(books_collection):
    """The books collection holding exactly the twelve seed records."""
    seed_collection(books_collection, BOOKS)
    return books_collection


@pytest.fixture
def seed_dicts():
    return [book.model_dump() for book in BOOKS]


# ── FastAPI test client ───────────────────────────────────────────────────────

@pytest.fixture
def api_client(mongo_db, monkeypatch):
    """TestClient with the API's database handle pointed at mongomock."""
    from fastapi.testclient import TestClient

    import database
    import main
    monkeypatch.setattr(database, "db", mongo_db)
    monkeypatch.setattr(main, "db", mongo_db)
    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def offline_api_client(monkeypatch):
    """TestClient with no database configured."""
    from fastapi.testclient import TestClient

    import database
    import main
    monkeypatch.setattr(database, "db", None)
    monkeypatch.setattr(main, "db", None)
    with TestClient(main.app) as c:
        yield c
