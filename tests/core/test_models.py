"""
Tests for request validation and stored-value conversion.
"""

from datetime import date, datetime

import pytest
from bson import ObjectId
from pydantic import ValidationError

from movie_api.models.movie import MovieRead
from movie_api.models.user import UserCreate, UserUpdate
from movie_api.utils.helpers import as_date, date_to_datetime


class TestUserCreate:

    def test_valid(self):
        user = UserCreate(Username="alice1", Password="secret12", Email="alice@x.com", Birthday="1990-05-17")
        assert user.Birthday == date(1990, 5, 17)

    def test_blank_birthday_is_none(self):
        user = UserCreate(Username="alice1", Password="secret12", Email="alice@x.com", Birthday="")
        assert user.Birthday is None

    @pytest.mark.parametrize("username", ["abcd", "alice 1", "alice-1", "ålice1"])
    def test_invalid_usernames(self, username):
        with pytest.raises(ValidationError):
            UserCreate(Username=username, Password="secret12", Email="alice@x.com")

    def test_invalid_birthday(self):
        with pytest.raises(ValidationError):
            UserCreate(Username="alice1", Password="secret12", Email="alice@x.com", Birthday="17/05/1990")


class TestUserUpdate:

    def test_all_fields_optional(self):
        update = UserUpdate()
        assert update.model_dump() == {"Username": None, "Password": None, "Email": None, "Birthday": None}

    def test_username_still_constrained(self):
        with pytest.raises(ValidationError):
            UserUpdate(Username="bob")


class TestMovieRead:

    def test_object_id_rendered_as_string(self):
        oid = ObjectId()
        movie = MovieRead.model_validate({"_id": oid, "Title": "Inception", "Description": "Dreams."})
        assert movie.id == str(oid)
        assert movie.model_dump(by_alias=True)["_id"] == str(oid)
        assert movie.Actors == []
        assert movie.Director is None


class TestDateHelpers:

    def test_date_to_datetime(self):
        assert date_to_datetime(date(1990, 5, 17)) == datetime(1990, 5, 17)
        assert date_to_datetime(None) is None

    @pytest.mark.parametrize("stored, expected", [
        (datetime(1990, 5, 17), date(1990, 5, 17)),
        (date(1990, 5, 17), date(1990, 5, 17)),
        ("1990-05-17T00:00:00.000Z", date(1990, 5, 17)),
        ("garbage", None),
        (None, None),
    ])
    def test_as_date(self, stored, expected):
        assert as_date(stored) == expected
