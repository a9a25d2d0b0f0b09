from fastapi import APIRouter

from logstore.api.v1.endpoints import events, records

api_router = APIRouter()
api_router.include_router(events.router, prefix="/events", tags=["events"])
api_router.include_router(records.router, prefix="/records", tags=["records"])
