from fastapi import APIRouter

from auditsearch.api.routes import events, health

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(events.router, tags=["events"])
