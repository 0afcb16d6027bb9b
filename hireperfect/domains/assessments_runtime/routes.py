"""Router assembly for the assessment runtime domain."""

from fastapi import APIRouter

from .candidate_runtime_routes import router as candidate_runtime_router
from .reporting_routes import admin_router, candidate_router

router = APIRouter(prefix="/assessment", tags=["Assessment"])
router.include_router(candidate_runtime_router)

__all__ = ["router", "candidate_router", "admin_router"]
