import logging

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from movie_api.api.deps import get_db
from movie_api.models.auth import LoginResponse, UserLogin
from movie_api.services.auth_service import AuthService, AuthServiceError

logger = logging.getLogger(__name__)
router = APIRouter()


# --- Dependencies ---
def get_auth_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> AuthService:
    return AuthService(db=db)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="User Login",
    description="Authenticates a user with Username and Password, returning a JWT and the user's profile.",
    responses={
        401: {"description": "Invalid username or password"},
        400: {"description": "Database error"},
    }
)
async def login_user(
    login_data: UserLogin,
    auth_service: AuthService = Depends(get_auth_service),
):
    try:
        return await auth_service.login_user(login_data)
    except AuthServiceError as e:
        logger.warning(f"Login failed: {e.message} (Status Code: {e.status_code})")
        headers = {"WWW-Authenticate": "Bearer"} if e.status_code == status.HTTP_401_UNAUTHORIZED else None
        raise HTTPException(status_code=e.status_code, detail=e.message, headers=headers)
