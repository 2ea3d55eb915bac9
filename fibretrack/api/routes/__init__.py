# API Routes
from .holiday_routes import router as holiday_router
from .deadline_routes import router as deadline_router

__all__ = [
    "holiday_router",
    "deadline_router",
]
