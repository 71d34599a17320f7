"""Root API router — everything is served under ``/api``, one sub-router per version."""

from fastapi import APIRouter

from app.presentation.api.v1.router import router as v1_router

router = APIRouter(prefix="/api")
router.include_router(v1_router)
