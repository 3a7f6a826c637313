# movie_api/services/movie_service.py

import logging
from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from movie_api.models.movie import MovieDirector, MovieGenre, MovieRead

logger = logging.getLogger(__name__)

MOVIES_COLLECTION = "movies"


class MovieNotFoundError(Exception):
    """Raised when no movie matches a lookup."""
    pass


class MovieService:
    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initializes the Movie Service.

        Args:
            db: An instance of AsyncIOMotorDatabase (Motor client).
        """
        self.db = db
        self.collection = db[MOVIES_COLLECTION]

    async def get_movies(self) -> List[MovieRead]:
        """
        Retrieves the whole catalog in storage order.

        Raises:
            PyMongoError: If a database error occurs.
        """
        try:
            movies_raw = await self.collection.find({}).to_list(length=None)
            logger.info(f"Fetched {len(movies_raw)} movies.")
            return [MovieRead.model_validate(doc) for doc in movies_raw]
        except PyMongoError as e:
            logger.error(f"Database error while fetching movies: {e}", exc_info=True)
            raise

    async def get_movie_by_title(self, title: str) -> MovieRead:
        """
        Retrieves the movie whose Title matches exactly.

        Raises:
            MovieNotFoundError: If no movie has this title.
            PyMongoError: If a database error occurs.
        """
        try:
            movie_doc = await self.collection.find_one({"Title": title})
        except PyMongoError as e:
            logger.error(f"Database error while fetching movie '{title}': {e}", exc_info=True)
            raise

        if not movie_doc:
            logger.warning(f"Movie with title '{title}' not found in database.")
            raise MovieNotFoundError(f"Can't find a movie with this title: {title}")
        return MovieRead.model_validate(movie_doc)

    async def get_director(self, name: str) -> MovieDirector:
        """
        Returns the embedded Director of the first movie directed by `name`.

        Raises:
            MovieNotFoundError: If no movie has a director with this name.
            PyMongoError: If a database error occurs.
        """
        try:
            movie_doc = await self.collection.find_one({"Director.Name": name}, {"Director": 1})
        except PyMongoError as e:
            logger.error(f"Database error while fetching director '{name}': {e}", exc_info=True)
            raise

        if not movie_doc or not movie_doc.get("Director"):
            logger.warning(f"Director '{name}' not found in database.")
            raise MovieNotFoundError(f"Can't find a director with this name: {name}")
        return MovieDirector.model_validate(movie_doc["Director"])

    async def get_genre(self, name: str) -> MovieGenre:
        """
        Returns the embedded Genre of the first movie whose genre is `name`.

        Raises:
            MovieNotFoundError: If no movie has a genre with this name.
            PyMongoError: If a database error occurs.
        """
        try:
            movie_doc = await self.collection.find_one({"Genre.Name": name}, {"Genre": 1})
        except PyMongoError as e:
            logger.error(f"Database error while fetching genre '{name}': {e}", exc_info=True)
            raise

        if not movie_doc or not movie_doc.get("Genre"):
            logger.warning(f"Genre '{name}' not found in database.")
            raise MovieNotFoundError(f"Can't find the genre: {name}")
        return MovieGenre.model_validate(movie_doc["Genre"])
