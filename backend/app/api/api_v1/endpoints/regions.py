import logging
from datetime import datetime
from typing import List, Optional

from app.core.auth import get_current_user_id
from app.core.config import get_current_season
from app.core.errors import service_error
from app.db.supabase import get_supabase
from app.schemas.region import CoefficientResponse, RegionResponse
from app.services.ranking_data import recalculate_region_coefficient
from fastapi import APIRouter, Depends, HTTPException, Query
from supabase import Client

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[RegionResponse])
def get_regions(client: Client = Depends(get_supabase)):
    """Get all regions with their current coefficient."""
    try:
        response = (
            client.table("regions")
            .select("id, name, code, coefficient")
            .order("name")
            .execute()
        )
    except Exception as e:
        raise service_error(e, "Error fetching regions")
    return response.data or []


@router.post("/{region_id}/recalculate-coefficient", response_model=CoefficientResponse)
def recalculate_coefficient(
    region_id: str,
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Season year"),
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase),
    current_season: int = Depends(get_current_season),
):
    """
    Recompute a region's coefficient from its teams' CE1 and CE2 points in
    one season and store it. Admin only.
    """
    season = year or current_season

    try:
        region = client.table("regions").select("id").eq("id", region_id).execute()
        if not region.data:
            raise HTTPException(status_code=404, detail="Region not found")

        total_points, coefficient = recalculate_region_coefficient(
            client, region_id, season
        )
    except HTTPException:
        raise
    except Exception as e:
        raise service_error(e, f"Error recalculating coefficient for region {region_id}")

    logger.info(f"Region {region_id} coefficient recalculated by {user_id}")
    return CoefficientResponse(
        region_id=region_id,
        year=season,
        total_points=total_points,
        coefficient=coefficient,
        recalculated_at=datetime.now(),
    )
