# Synchronous MongoDB access for the data loading scripts
# data_processing/common/db_connect.py

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConfigurationError, ConnectionFailure

logger = logging.getLogger(__name__)

# data_processing/.env, when present, supplies the same variables as the API
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), '..', '.env'))

FALLBACK_DB_NAME = "movies_apiDB"
SERVER_SELECTION_TIMEOUT_MS = 5000

_mongo_client: Optional[MongoClient] = None


def mongodb_uri_from_env() -> str:
    """Reads the connection string, accepting the API's legacy CONNECTION_URI name."""
    uri = os.environ.get("MONGODB_URI") or os.environ.get("CONNECTION_URI")
    if not uri:
        logger.critical("Neither MONGODB_URI nor CONNECTION_URI is set.")
        raise ValueError("MONGODB_URI (or CONNECTION_URI) environment variable is required.")
    return uri


def get_mongo_client() -> MongoClient:
    """
    Returns the script's MongoClient, connecting and pinging on first use.

    Raises:
        ValueError: If no connection string is configured.
        ConfigurationError: If the connection string is malformed.
        ConnectionFailure: If the server cannot be reached.
    """
    global _mongo_client
    if _mongo_client is not None:
        return _mongo_client

    uri = mongodb_uri_from_env()
    logger.info(f"Connecting to MongoDB at {uri[:15]}...")
    try:
        client = MongoClient(uri, serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS)
        client.admin.command('ping')
    except (ConfigurationError, ConnectionFailure) as e:
        logger.critical(f"Could not connect to MongoDB: {e}", exc_info=True)
        raise

    logger.info("MongoDB connection successful.")
    _mongo_client = client
    return client


def get_mongo_database(client: Optional[MongoClient] = None, db_name: Optional[str] = None) -> Database:
    """
    Picks the movies database: an explicit name wins, then the database in the
    URI, then MONGODB_DB_NAME, then the fallback.
    """
    client = client or get_mongo_client()
    if db_name:
        return client[db_name]
    database = client.get_default_database(default=os.environ.get("MONGODB_DB_NAME", FALLBACK_DB_NAME))
    logger.debug(f"Using database: {database.name}")
    return database


def close_mongo_client() -> None:
    global _mongo_client
    if _mongo_client is not None:
        _mongo_client.close()
        logger.info("MongoDB connection closed.")
    _mongo_client = None
