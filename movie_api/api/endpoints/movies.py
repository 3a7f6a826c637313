# movie_api/api/endpoints/movies.py

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from movie_api.api.deps import get_current_user, get_db
from movie_api.models.auth import CurrentUser
from movie_api.models.movie import MovieDirector, MovieGenre, MovieRead
from movie_api.services.movie_service import MovieNotFoundError, MovieService

logger = logging.getLogger(__name__)
router = APIRouter()


# --- Dependency to get the service ---
def get_movie_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> MovieService:
    return MovieService(db=db)
# --- ---


@router.get(
    "",  # GET /movies
    response_model=List[MovieRead],
    status_code=status.HTTP_201_CREATED,
    summary="List Movies",
    description="Retrieve every movie in the catalog.",
    responses={400: {"description": "Database error"}},
)
async def list_movies(
    current_user: CurrentUser = Depends(get_current_user),
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        return await movie_service.get_movies()
    except PyMongoError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"An Error occurred: {e}")


@router.get(
    "/title/{Title}",
    response_model=MovieRead,
    status_code=status.HTTP_201_CREATED,
    summary="Get Movie by Title",
    responses={
        404: {"description": "Movie not found"},
        400: {"description": "Database error"},
    },
)
async def get_movie(
    Title: str,
    current_user: CurrentUser = Depends(get_current_user),
    movie_service: MovieService = Depends(get_movie_service),
):
    """
    Fetches a single movie by its exact title.
    """
    try:
        return await movie_service.get_movie_by_title(Title)
    except MovieNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PyMongoError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"An Error occurred: {e}")


@router.get(
    "/director/{Director}",
    response_model=MovieDirector,
    status_code=status.HTTP_201_CREATED,
    summary="Get Director",
    description="Returns the director record embedded in the first movie directed by this person.",
    responses={
        404: {"description": "Director not found"},
        400: {"description": "Database error"},
    },
)
async def get_director(
    Director: str,
    current_user: CurrentUser = Depends(get_current_user),
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        return await movie_service.get_director(Director)
    except MovieNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PyMongoError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"An Error occurred: {e}")


@router.get(
    "/genre/{Genre}",
    response_model=MovieGenre,
    status_code=status.HTTP_201_CREATED,
    summary="Get Genre",
    description="Returns the genre record embedded in the first movie of this genre.",
    responses={
        404: {"description": "Genre not found"},
        400: {"description": "Database error"},
    },
)
async def get_genre(
    Genre: str,
    current_user: CurrentUser = Depends(get_current_user),
    movie_service: MovieService = Depends(get_movie_service),
):
    try:
        return await movie_service.get_genre(Genre)
    except MovieNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PyMongoError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Can't find the genre-Err: {e}")
