"""
Tests for the movie catalog loader.
"""

import json

import mongomock
import pytest
from pymongo.errors import DuplicateKeyError

from data_processing.common.db_connect import get_mongo_database, mongodb_uri_from_env
from data_processing.scripts.load_movies import DEFAULT_MOVIES_FILE, load_movies, read_movies


@pytest.fixture
def sync_db():
    return mongomock.MongoClient()["movies_test"]


class TestReadMovies:

    def test_bundled_catalog_is_valid(self):
        movies = read_movies(DEFAULT_MOVIES_FILE)
        assert len(movies) >= 1
        assert all(m["Title"] and m["Description"] for m in movies)

    def test_invalid_entries_are_skipped(self, tmp_path):
        path = tmp_path / "movies.json"
        path.write_text(json.dumps([
            {"Title": "Good", "Description": "Fine."},
            {"Title": "No description"},
        ]))
        movies = read_movies(str(path))
        assert [m["Title"] for m in movies] == ["Good"]

    def test_non_array_rejected(self, tmp_path):
        path = tmp_path / "movies.json"
        path.write_text(json.dumps({"Title": "Alone"}))
        with pytest.raises(ValueError):
            read_movies(str(path))


class TestLoadMovies:

    def test_load_then_reload_replaces_by_title(self, sync_db):
        movies = [{"Title": "Inception", "Description": "Dreams.", "Actors": []}]
        assert load_movies(sync_db, movies) == {"inserted": 1, "replaced": 0}

        movies[0]["Description"] = "Dreams within dreams."
        assert load_movies(sync_db, movies) == {"inserted": 0, "replaced": 1}
        assert sync_db["movies"].count_documents({}) == 1
        assert sync_db["movies"].find_one({"Title": "Inception"})["Description"] == "Dreams within dreams."

    def test_creates_unique_username_index(self, sync_db):
        load_movies(sync_db, [])
        sync_db["users"].insert_one({"Username": "alice1"})
        with pytest.raises(DuplicateKeyError):
            sync_db["users"].insert_one({"Username": "alice1"})


class TestDbConnect:

    def test_uri_accepts_legacy_name(self, monkeypatch):
        monkeypatch.delenv("MONGODB_URI", raising=False)
        monkeypatch.setenv("CONNECTION_URI", "mongodb://db.example:27017/myflix")
        assert mongodb_uri_from_env() == "mongodb://db.example:27017/myflix"

    def test_missing_uri(self, monkeypatch):
        monkeypatch.delenv("MONGODB_URI", raising=False)
        monkeypatch.delenv("CONNECTION_URI", raising=False)
        with pytest.raises(ValueError):
            mongodb_uri_from_env()

    def test_database_name_resolution(self, monkeypatch):
        client = mongomock.MongoClient()
        assert get_mongo_database(client, "explicit").name == "explicit"

        monkeypatch.setenv("MONGODB_DB_NAME", "from_env")
        assert get_mongo_database(client).name == "from_env"

        monkeypatch.delenv("MONGODB_DB_NAME")
        assert get_mongo_database(client).name == "movies_apiDB"
