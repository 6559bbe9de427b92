"""API routes package."""

from fastapi import APIRouter

from amper_tracker.api.routes import data, health, products, users

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(data.router)
api_router.include_router(users.router)
api_router.include_router(products.router)
