"""Top-level API router: mounts the feature routers under `/api`."""

from fastapi import APIRouter

from src.backend.v1.api.records_router import records_router

app_v1 = APIRouter(
    prefix="/api",
    responses={404: {"description": "Not found"}},
)

app_v1.include_router(records_router)
