"""
Router package for the Workout Generator API.

This package contains all API routers organized by domain:
- health: Health check endpoints
- generation: Background workout generation jobs and status polling
- library: Profile, saved workouts and training calendar
"""

from api.routers.health import router as health_router
from api.routers.generation import router as generation_router
from api.routers.library import router as library_router

__all__ = [
    "health_router",
    "generation_router",
    "library_router",
]
