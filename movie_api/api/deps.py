# FastAPI dependencies (database, authenticated user, ownership)
# movie_api/api/deps.py

import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, PyMongoError

from movie_api.core.config import settings
from movie_api.core.security import CredentialsException, get_current_user_id
from movie_api.models.auth import CurrentUser
from movie_api.services.user_service import UserService, ensure_indexes

logger = logging.getLogger(__name__)

PERMISSION_DENIED = "Permission denied!"

# --- Global Clients (Initialized once in the lifespan) ---

mongo_client: Optional[AsyncIOMotorClient] = None
db_instance: Optional[AsyncIOMotorDatabase] = None


async def initialize_connections():
    """
    Initializes the MongoDB connection and the indexes the API relies on.
    Call this during FastAPI startup using lifespan events.
    """
    global mongo_client, db_instance
    logger.info("Initializing external connections...")

    try:
        logger.info(f"Attempting to connect to MongoDB: {settings.MONGODB_URI.get_secret_value()[:15]}...")
        mongo_client = AsyncIOMotorClient(settings.MONGODB_URI.get_secret_value())
        # Ping the server to verify connection early
        await mongo_client.admin.command('ping')

        # Database named in the URI, else the configured fallback
        db_instance = mongo_client.get_default_database(default=settings.MONGODB_DB_NAME)
        logger.info(f"MongoDB client initialized successfully. Using database: '{db_instance.name}'")

    except ConnectionFailure as e:
        logger.error(f"MongoDB connection failed during initialization: {e}", exc_info=True)
        _discard_client()
        return
    except PyMongoError as e:
        logger.error(f"Unexpected MongoDB error during initialization: {e}", exc_info=True)
        _discard_client()
        return

    # An index build failure (e.g. duplicate Usernames already stored) leaves the database usable
    try:
        await ensure_indexes(db_instance)
    except PyMongoError as e:
        logger.error(f"Could not ensure MongoDB indexes: {e}", exc_info=True)


def _discard_client():
    global mongo_client, db_instance
    if mongo_client is not None:
        mongo_client.close()
    mongo_client = None
    db_instance = None


async def close_connections():
    """
    Closes the MongoDB connection.
    Call this during FastAPI shutdown using lifespan events.
    """
    global mongo_client, db_instance
    logger.info("Closing external connections...")
    if mongo_client:
        mongo_client.close()
        logger.info("MongoDB client closed.")
    mongo_client = None
    db_instance = None


# --- Database Dependency ---

async def get_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    FastAPI dependency that yields the application's MongoDB database instance.

    Raises:
        HTTPException 503: If the database instance is not available.
    """
    if db_instance is None:
        logger.critical("MongoDB database instance is not available. Check initialization.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database service not available.",
        )
    # Motor manages connection pooling internally. Yielding the db instance is sufficient.
    yield db_instance


# --- Authentication Dependency ---

async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> CurrentUser:
    """
    Resolves the verified token to exactly one stored user.

    Raises:
        CredentialsException: If the user behind the token no longer exists.
    """
    try:
        user_doc = await UserService(db=db).find_by_id(user_id)
    except PyMongoError as e:
        logger.error(f"Error resolving authenticated user {user_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"An Error occurred: {e}")

    if not user_doc:
        logger.warning(f"Authenticated user ID {user_id} not found in database.")
        raise CredentialsException(detail="User not found")
    return CurrentUser(id=str(user_doc["_id"]), Username=user_doc["Username"])


# --- Ownership Dependency ---

async def get_owned_username(
    Username: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> str:
    """
    Guards routes that mutate the user named in the path.

    Returns:
        The path Username once it is known to exist and belong to the caller.

    Raises:
        HTTPException 404: If no user has this Username.
        HTTPException 400: If the caller is not that user.
    """
    try:
        target = await UserService(db=db).find_by_username(Username)
    except PyMongoError as e:
        logger.error(f"Error looking up user {Username}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"An Error occurred: {e}")

    if not target:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No user with Username: {Username} found",
        )
    if current_user.Username != Username:
        logger.warning(f"User {current_user.Username} attempted to modify {Username}.")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=PERMISSION_DENIED)
    return Username
