"""API route registration."""

from fastapi import APIRouter

from filehost.api.routes import files, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(files.router, tags=["files"])
