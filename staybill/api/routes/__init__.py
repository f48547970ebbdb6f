"""API routes package."""

from fastapi import APIRouter

from staybill.api.routes import auth, health, properties, settlements, stays, users

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(properties.router)
api_router.include_router(stays.router)
api_router.include_router(settlements.router)
