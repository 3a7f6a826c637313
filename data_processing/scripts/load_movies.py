# Loads the movie catalog into MongoDB
# data_processing/scripts/load_movies.py
#
# Usage: python -m data_processing.scripts.load_movies [path/to/movies.json]

import json
import logging
import os
import sys
import time
from typing import Any, Dict, List

from pydantic import ValidationError
from pymongo import ASCENDING
from pymongo.database import Database
from pymongo.errors import PyMongoError

from data_processing.common.db_connect import close_mongo_client, get_mongo_client, get_mongo_database
from movie_api.models.movie import MovieBase

# --- Configuration ---
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper(),
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

DEFAULT_MOVIES_FILE = os.path.join(os.path.dirname(__file__), '..', 'data', 'movies.json')
MONGO_MOVIES_COLLECTION = "movies"
MONGO_USERS_COLLECTION = "users"
USERNAME_INDEX = "Username_unique"


def read_movies(path: str) -> List[Dict[str, Any]]:
    """
    Reads a JSON array of movies and validates each entry.

    Entries failing validation are logged and skipped.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw_movies = json.load(f)
    if not isinstance(raw_movies, list):
        raise ValueError(f"{path} must contain a JSON array of movies.")

    movies = []
    for position, raw in enumerate(raw_movies):
        try:
            movie = MovieBase.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping movie #{position} in {path}: {e}")
            continue
        movies.append(movie.model_dump(exclude_none=True))
    return movies


def load_movies(db: Database, movies: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Upserts movies by Title and ensures the unique Username index the API relies on.

    Returns:
        Counts of inserted and replaced movies.
    """
    collection = db[MONGO_MOVIES_COLLECTION]
    inserted = replaced = 0
    for movie in movies:
        result = collection.replace_one({"Title": movie["Title"]}, movie, upsert=True)
        if result.upserted_id is not None:
            inserted += 1
        else:
            replaced += 1

    db[MONGO_USERS_COLLECTION].create_index([("Username", ASCENDING)], unique=True, name=USERNAME_INDEX)
    logger.info(f"Loaded movies: {inserted} inserted, {replaced} replaced.")
    return {"inserted": inserted, "replaced": replaced}


# --- Main Function ---
def main(argv: List[str]) -> int:
    movies_file = argv[1] if len(argv) > 1 else DEFAULT_MOVIES_FILE
    status_data: Dict[str, Any] = {"script": os.path.basename(__file__), "status": "STARTED"}
    logger.info(f"Starting script: {status_data['script']} with {movies_file}")
    start_time = time.time()

    try:
        movies = read_movies(movies_file)
        db = get_mongo_database(client=get_mongo_client())
        status_data.update(load_movies(db, movies))
        status_data["status"] = "SUCCESS"
    except (OSError, ValueError) as e:
        logger.critical(f"Invalid input or configuration: {e}")
        status_data["status"] = "FAILURE"
        status_data["error_details"] = str(e)
    except PyMongoError as e:
        logger.critical(f"MongoDB error while loading movies: {e}", exc_info=True)
        status_data["status"] = "FAILURE"
        status_data["error_details"] = str(e)
    finally:
        close_mongo_client()

    status_data["duration_seconds"] = round(time.time() - start_time, 2)
    print(json.dumps(status_data, indent=2))
    return 1 if status_data["status"] == "FAILURE" else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
