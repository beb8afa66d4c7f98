from fastapi import APIRouter

from app.api.v1 import health, profile, signals

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(signals.router, prefix="/user-signals", tags=["signals"])
