# movie_api/services/user_service.py

import logging
from typing import Any, Dict, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from movie_api.core.security import hash_password
from movie_api.models.user import (
    FavoritesUser,
    SignupResponse,
    UserCreate,
    UserProfile,
    UserUpdate,
)
from movie_api.utils.helpers import as_date, date_to_datetime, safe_get

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
USERNAME_INDEX = "Username_unique"


class UserNotFoundError(Exception):
    """Raised when no user has the requested Username."""
    pass


class UsernameTakenError(Exception):
    """Raised when a signup or rename collides with an existing Username."""
    pass


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Creates the unique index on users.Username.

    Uniqueness is enforced by the store so concurrent signups or renames to
    the same Username cannot both succeed.
    """
    await db[USERS_COLLECTION].create_index(
        [("Username", ASCENDING)], unique=True, name=USERNAME_INDEX
    )
    logger.info(f"Ensured unique index '{USERNAME_INDEX}' on '{USERS_COLLECTION}'.")


def to_profile(user_doc: Dict[str, Any]) -> UserProfile:
    """Maps a stored user document to its public profile."""
    return UserProfile(
        Username=user_doc["Username"],
        Email=safe_get(user_doc, "Email"),
        Birthday=as_date(safe_get(user_doc, "Birthday")),
        FavoriteMovies=[str(m) for m in safe_get(user_doc, "FavoriteMovies", [])],
    )


def _to_favorites(user_doc: Dict[str, Any]) -> FavoritesUser:
    return FavoritesUser(
        Username=user_doc["Username"],
        FavoriteMovies=[str(m) for m in safe_get(user_doc, "FavoriteMovies", [])],
    )


class UserService:
    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initializes the User Service.

        Args:
            db: An instance of AsyncIOMotorDatabase (Motor client).
        """
        self.db = db
        self.collection = db[USERS_COLLECTION]

    # --- Lookups ---

    async def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Returns the raw user document for a database id string, or None."""
        if not ObjectId.is_valid(user_id):
            logger.warning(f"Invalid user ID format: {user_id}")
            return None
        return await self.collection.find_one({"_id": ObjectId(user_id)})

    async def find_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        """Returns the raw user document for a Username, or None."""
        return await self.collection.find_one({"Username": username})

    async def get_user(self, username: str) -> UserProfile:
        """
        Retrieves the public profile of a user.

        Raises:
            UserNotFoundError: If the Username does not exist.
            PyMongoError: If a database error occurs.
        """
        try:
            user_doc = await self.find_by_username(username)
        except PyMongoError as e:
            logger.error(f"Database error while fetching user {username}: {e}", exc_info=True)
            raise

        if not user_doc:
            logger.warning(f"User {username} not found in database.")
            raise UserNotFoundError(f"No user with Username: {username} found")
        return to_profile(user_doc)

    # --- Mutations ---

    async def signup(self, user_in: UserCreate) -> SignupResponse:
        """
        Creates a new user with a hashed password and an empty favorites list.

        Raises:
            UsernameTakenError: If the Username is already registered.
            PyMongoError: If a database error occurs during insertion.
        """
        user_doc = {
            "Username": user_in.Username,
            "Password": hash_password(user_in.Password),
            "Email": user_in.Email,
            "Birthday": date_to_datetime(user_in.Birthday),
            "FavoriteMovies": [],
        }
        try:
            insert_result = await self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning(f"Signup rejected: Username {user_in.Username} already exists.")
            raise UsernameTakenError(f"User with {user_in.Username} already exist")
        except PyMongoError as e:
            logger.error(f"Database error creating user {user_in.Username}: {e}", exc_info=True)
            raise

        logger.info(f"User signed up: {user_in.Username} (ID {insert_result.inserted_id})")
        return SignupResponse(
            Username=user_in.Username,
            Email=user_in.Email,
            Birthday=user_in.Birthday,
        )

    async def update_user(self, username: str, update_in: UserUpdate) -> UserProfile:
        """
        Applies a sparse update: only fields present and non-empty in the
        request are written, the Password being re-hashed.

        Raises:
            UserNotFoundError: If the Username does not exist.
            UsernameTakenError: If renaming onto another account's Username.
            PyMongoError: If a database error occurs.
        """
        update_fields: Dict[str, Any] = {}
        if update_in.Username:
            update_fields["Username"] = update_in.Username
        if update_in.Password:
            update_fields["Password"] = hash_password(update_in.Password)
        if update_in.Email:
            update_fields["Email"] = update_in.Email
        if update_in.Birthday:
            update_fields["Birthday"] = date_to_datetime(update_in.Birthday)

        if not update_fields:
            logger.info(f"Update for user {username} carried no fields; nothing written.")
            return await self.get_user(username)

        try:
            updated_doc = await self.collection.find_one_and_update(
                {"Username": username},
                {"$set": update_fields},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            logger.warning(f"Rename of {username} rejected: Username {update_in.Username} is taken.")
            raise UsernameTakenError("Username is already in use.  Please choose another username")
        except PyMongoError as e:
            logger.error(f"Database error updating user {username}: {e}", exc_info=True)
            raise

        if not updated_doc:
            raise UserNotFoundError(f"No user with Username: {username} found")
        logger.info(f"Updated user {username}: fields {sorted(update_fields)}")
        return to_profile(updated_doc)

    async def add_favorite(self, username: str, movie_id: str) -> FavoritesUser:
        """
        Appends `movie_id` to the user's FavoriteMovies. Duplicates are kept
        and the movie's existence is not checked.

        Raises:
            UserNotFoundError: If the Username does not exist.
            PyMongoError: If a database error occurs.
        """
        try:
            updated_doc = await self.collection.find_one_and_update(
                {"Username": username},
                {"$push": {"FavoriteMovies": movie_id}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Database error adding favorite {movie_id} for {username}: {e}", exc_info=True)
            raise

        if not updated_doc:
            raise UserNotFoundError(f"No user with Username: {username} found")
        logger.info(f"User {username} added favorite {movie_id}")
        return _to_favorites(updated_doc)

    async def remove_favorite(self, username: str, movie_id: str) -> FavoritesUser:
        """
        Removes every occurrence of `movie_id` from the user's FavoriteMovies;
        the remaining entries keep their order.

        Raises:
            UserNotFoundError: If the Username does not exist.
            PyMongoError: If a database error occurs.
        """
        try:
            updated_doc = await self.collection.find_one_and_update(
                {"Username": username},
                {"$pull": {"FavoriteMovies": movie_id}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Database error removing favorite {movie_id} for {username}: {e}", exc_info=True)
            raise

        if not updated_doc:
            raise UserNotFoundError(f"No user with Username: {username} found")
        logger.info(f"User {username} removed favorite {movie_id}")
        return _to_favorites(updated_doc)

    async def deregister(self, username: str) -> None:
        """
        Hard-deletes the user record.

        Raises:
            UserNotFoundError: If the Username does not exist.
            PyMongoError: If a database error occurs.
        """
        try:
            deleted_doc = await self.collection.find_one_and_delete({"Username": username})
        except PyMongoError as e:
            logger.error(f"Database error deleting user {username}: {e}", exc_info=True)
            raise

        if not deleted_doc:
            logger.warning(f"Deregister failed: user {username} not found.")
            raise UserNotFoundError(f"No user with Username: {username} found")
        logger.info(f"User {username} deregistered.")
