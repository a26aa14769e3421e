from app.api.api_v1.endpoints import configuration, positions, ranking, regions
from fastapi import APIRouter

api_router = APIRouter()

api_router.include_router(ranking.router, prefix="/ranking", tags=["ranking"])
api_router.include_router(
    configuration.router, prefix="/configuration", tags=["configuration"]
)
api_router.include_router(regions.router, prefix="/regions", tags=["regions"])
api_router.include_router(positions.router, prefix="/positions", tags=["positions"])
