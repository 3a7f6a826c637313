"""
API Router Module - Aggregates all endpoint routers
"""
from fastapi import APIRouter

from movie_api.api.endpoints import auth, health, movies, users

# Routing table, built once at import
api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, tags=["Auth"])
api_router.include_router(movies.router, prefix="/movies", tags=["Movies"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
