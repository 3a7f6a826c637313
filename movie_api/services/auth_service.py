import logging

from fastapi import status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from movie_api.core.security import create_access_token, verify_password
from movie_api.models.auth import LoginResponse, UserLogin
from movie_api.services.user_service import UserService, to_profile

logger = logging.getLogger(__name__)


class AuthServiceError(Exception):
    """Custom exception for Auth service errors."""
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AuthService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.user_service = UserService(db=db)

    async def login_user(self, login_data: UserLogin) -> LoginResponse:
        """Checks a Username/Password pair and issues a token for the matching user."""
        logger.info(f"Attempting login for user: {login_data.Username}")
        try:
            user_doc = await self.user_service.find_by_username(login_data.Username)
        except PyMongoError as e:
            logger.error(f"Database error during login for {login_data.Username}: {e}", exc_info=True)
            raise AuthServiceError(f"Login failed: {e}", status.HTTP_400_BAD_REQUEST)

        # Same message for unknown user and wrong password
        if not user_doc or not verify_password(login_data.Password, user_doc.get("Password")):
            logger.warning(f"Login rejected for user: {login_data.Username}")
            raise AuthServiceError("Incorrect username or password.", status.HTTP_401_UNAUTHORIZED)

        token = create_access_token(user_id=str(user_doc["_id"]), username=user_doc["Username"])
        logger.info(f"Successfully logged in user: {user_doc['_id']} ({user_doc['Username']})")
        return LoginResponse(user=to_profile(user_doc), token=token)
