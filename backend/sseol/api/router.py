"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from sseol.api import analyze_images, health, place_images

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(analyze_images.router)
api_router.include_router(place_images.router)
