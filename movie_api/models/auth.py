from pydantic import BaseModel

from movie_api.models.user import UserProfile


class UserLogin(BaseModel):
    """Data required for user login"""
    Username: str
    Password: str


class LoginResponse(BaseModel):
    """Response containing the signed token and the user's profile"""
    user: UserProfile
    token: str
    token_type: str = "bearer"


class CurrentUser(BaseModel):
    """Identity resolved from a verified token, scoped to one request"""
    id: str
    Username: str
