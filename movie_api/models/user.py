# movie_api/models/user.py

from datetime import date
from typing import Any, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

USERNAME_MIN_LENGTH = 5
USERNAME_LENGTH_MESSAGE = "The user name is required and must be at least 5 characters long"
USERNAME_CHARSET_MESSAGE = "Username contains non alphanumeric characters - not allowed."
PASSWORD_REQUIRED_MESSAGE = "The password is required"
PASSWORD_MAX_BYTES = 72
PASSWORD_LENGTH_MESSAGE = "The password must be at most 72 bytes"
EMAIL_MESSAGE = "Please type a valid email"


def check_username(value: str) -> str:
    """Applies the Username constraints shared by signup and update."""
    if len(value) < USERNAME_MIN_LENGTH:
        raise ValueError(USERNAME_LENGTH_MESSAGE)
    # str.isalnum() accepts non-ASCII letters
    if not (value.isascii() and value.isalnum()):
        raise ValueError(USERNAME_CHARSET_MESSAGE)
    return value


def check_password_length(value: str) -> str:
    # bcrypt only hashes the first 72 bytes
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(PASSWORD_LENGTH_MESSAGE)
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# --- Request bodies ---

class UserCreate(BaseModel):
    """Signup request body. Missing fields are validated as empty strings so every rule reports its own message."""
    Username: str = Field("", validate_default=True)
    Password: str = Field("", validate_default=True)
    Email: str = Field("", validate_default=True)
    Birthday: Optional[date] = None

    @field_validator("Username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return check_username(v)

    @field_validator("Password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not v:
            raise ValueError(PASSWORD_REQUIRED_MESSAGE)
        return check_password_length(v)

    @field_validator("Email")
    @classmethod
    def validate_email_shape(cls, v: str) -> str:
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError:
            raise ValueError(EMAIL_MESSAGE)
        return v

    @field_validator("Birthday", mode="before")
    @classmethod
    def blank_birthday(cls, v: Any) -> Any:
        return _blank_to_none(v)


class UserUpdate(BaseModel):
    """
    Update request body. Username is constrained as on signup and Password
    only by length; Email is accepted as given. Absent or empty fields are left untouched.
    """
    Username: Optional[str] = None
    Password: Optional[str] = None
    Email: Optional[str] = None
    Birthday: Optional[date] = None

    @field_validator("Username")
    @classmethod
    def validate_username(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return check_username(v)

    @field_validator("Password")
    @classmethod
    def validate_password(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return v
        return check_password_length(v)

    @field_validator("Birthday", mode="before")
    @classmethod
    def blank_birthday(cls, v: Any) -> Any:
        return _blank_to_none(v)


# --- Responses ---

class SignupResponse(BaseModel):
    status: str = "Successfully signed up!"
    Username: str
    Email: str
    Birthday: Optional[date] = None


class UserProfile(BaseModel):
    """Public view of a user record. Never carries the password hash."""
    Username: str
    Email: Optional[str] = None
    Birthday: Optional[date] = None
    FavoriteMovies: List[str] = Field(default_factory=list)


class FavoritesUser(BaseModel):
    Username: str
    FavoriteMovies: List[str] = Field(default_factory=list)


class FavoritesResponse(BaseModel):
    message: str
    updatedUser: FavoritesUser


class MessageResponse(BaseModel):
    message: str
