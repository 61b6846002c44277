from fastapi import APIRouter

from app.api.routes import analysis, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(analysis.router, prefix="/analysis", tags=["Analysis"])

__all__ = ["api_router"]
