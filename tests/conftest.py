"""
Shared fixtures: the real FastAPI app with MongoDB swapped for mongomock-motor.
"""

import asyncio
import os

# Settings are read at import time
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/movies_test")
os.environ.setdefault("JWT_SECRET", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from movie_api.api.deps import get_db
from movie_api.core.security import create_access_token
from movie_api.server import app
from movie_api.services.user_service import ensure_indexes

SAMPLE_MOVIES = [
    {
        "Title": "Inception",
        "Description": "A thief plants an idea through shared dreams.",
        "Genre": {"Name": "Science Fiction", "Description": "Imagined advances in science."},
        "Director": {"Name": "Christopher Nolan", "Bio": "British-American filmmaker.", "Birth": "1970"},
        "Actors": ["Leonardo DiCaprio", "Elliot Page"],
        "ImagePath": "inception.png",
        "Featured": True,
    },
    {
        "Title": "Spirited Away",
        "Description": "A girl wanders into a world of spirits.",
        "Genre": {"Name": "Animation", "Description": "Drawn or rendered images."},
        "Director": {"Name": "Hayao Miyazaki", "Bio": "Co-founder of Studio Ghibli.", "Birth": "1941"},
        "Actors": ["Rumi Hiiragi"],
        "ImagePath": "spirited.png",
        "Featured": False,
    },
]


def run(coro):
    """Runs a mongomock-motor coroutine from synchronous test code."""
    return asyncio.run(coro)


@pytest.fixture
def db():
    database = AsyncMongoMockClient()["movies_test"]
    run(ensure_indexes(database))
    run(database["movies"].insert_many([dict(m) for m in SAMPLE_MOVIES]))
    return database


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signup(client):
    """Signs a user up through the API and returns the response."""
    def _signup(username="alice1", password="secret12", email="alice@x.com", birthday="1990-05-17"):
        payload = {"Username": username, "Password": password, "Email": email}
        if birthday is not None:
            payload["Birthday"] = birthday
        return client.post("/users/signup", json=payload)
    return _signup


@pytest.fixture
def auth_headers(db):
    """Builds a bearer header for a stored user."""
    def _headers(username):
        user = run(db["users"].find_one({"Username": username}))
        assert user is not None, f"user {username} not stored"
        token = create_access_token(user_id=str(user["_id"]), username=username)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def alice(signup, auth_headers):
    """A signed-up user 'alice1' and its auth headers."""
    response = signup()
    assert response.status_code == 201
    return auth_headers("alice1")
