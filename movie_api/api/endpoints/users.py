# movie_api/api/endpoints/users.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from movie_api.api.deps import get_current_user, get_db, get_owned_username
from movie_api.models.auth import CurrentUser
from movie_api.models.user import (
    FavoritesResponse,
    MessageResponse,
    SignupResponse,
    UserCreate,
    UserProfile,
    UserUpdate,
)
from movie_api.services.user_service import UsernameTakenError, UserNotFoundError, UserService

logger = logging.getLogger(__name__)
router = APIRouter()

FAVORITE_ADDED = "Successfully added the movie to the favorite List!"
FAVORITE_REMOVED = "Successfully deleted the movie from the favorite list!"


# --- Dependency to get the service ---
def get_user_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> UserService:
    return UserService(db=db)
# --- ---


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign Up",
    description="Registers a new user account. The password is stored only as a bcrypt hash.",
    responses={
        409: {"description": "Username already exists"},
        422: {"description": "Validation failed"},
        400: {"description": "Database error"},
    },
)
async def signup_user(
    user_in: UserCreate,
    user_service: UserService = Depends(get_user_service),
):
    try:
        return await user_service.signup(user_in)
    except UsernameTakenError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except PyMongoError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"An Error occurred: {e}")


@router.get(
    "/{Username}",
    response_model=UserProfile,
    summary="Get User Info",
    description="Public profile of any user; readable by every authenticated caller.",
    responses={404: {"description": "User not found"}},
)
async def get_user_info(
    Username: str,
    current_user: CurrentUser = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    try:
        return await user_service.get_user(Username)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PyMongoError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"An Error occurred: {e}")


@router.put(
    "/update/{Username}",
    response_model=UserProfile,
    summary="Update User Details",
    description="Sparse update of the caller's own Username, Password, Email and Birthday.",
    responses={
        400: {"description": "Permission denied"},
        404: {"description": "User not found"},
        409: {"description": "Username already in use"},
        422: {"description": "Validation failed"},
        500: {"description": "Internal server error"},
    },
)
async def update_user(
    update_in: UserUpdate,
    username: str = Depends(get_owned_username),
    user_service: UserService = Depends(get_user_service),
):
    try:
        return await user_service.update_user(username, update_in)
    except UsernameTakenError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PyMongoError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Internal Server Error: {e}")


@router.put(
    "/{Username}/movies/add/{MovieID}",
    response_model=FavoritesResponse,
    summary="Add Favorite Movie",
    responses={
        400: {"description": "Permission denied or database error"},
        404: {"description": "User not found"},
    },
)
async def add_favorite(
    MovieID: str,
    username: str = Depends(get_owned_username),
    user_service: UserService = Depends(get_user_service),
):
    try:
        updated_user = await user_service.add_favorite(username, MovieID)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PyMongoError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Couldn't add movie to favorites List-Err: {e}",
        )
    return FavoritesResponse(message=FAVORITE_ADDED, updatedUser=updated_user)


@router.delete(
    "/{Username}/movies/remove/{MovieID}",
    response_model=FavoritesResponse,
    summary="Remove Favorite Movie",
    description="Removes every occurrence of the movie from the caller's favorites.",
    responses={
        400: {"description": "Permission denied or database error"},
        404: {"description": "User not found"},
    },
)
async def remove_favorite(
    MovieID: str,
    username: str = Depends(get_owned_username),
    user_service: UserService = Depends(get_user_service),
):
    try:
        updated_user = await user_service.remove_favorite(username, MovieID)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PyMongoError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Movie couldn't be deleted from favorite Movies-Err: {e}",
        )
    return FavoritesResponse(message=FAVORITE_REMOVED, updatedUser=updated_user)


@router.delete(
    "/deregister/{Username}",
    response_model=MessageResponse,
    summary="Deregister User",
    description="Permanently deletes the caller's account.",
    responses={
        400: {"description": "Permission denied or database error"},
        404: {"description": "User not found"},
    },
)
async def deregister_user(
    username: str = Depends(get_owned_username),
    user_service: UserService = Depends(get_user_service),
):
    try:
        await user_service.deregister(username)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PyMongoError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"User couldn't be deleted-Err: {e}")
    return MessageResponse(message=f"User with Username: {username} was deleted")
