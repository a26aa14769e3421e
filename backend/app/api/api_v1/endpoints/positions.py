"""
Manual position entry.

Positions entered here are stored with points from the simple field-size
formula, not the tier points tables used by the ranking.
"""

import logging

from app.core.auth import get_current_user_id
from app.core.config import settings
from app.core.errors import service_error
from app.db.supabase import get_supabase
from app.schemas.position import PositionCreate, PositionResponse, PositionUpdate
from app.services.scoring import calculate_formula_points
from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

logger = logging.getLogger(__name__)
router = APIRouter()


def _team_coefficient(team: dict) -> float | None:
    region = team.get("regions") or {}
    return region.get("coefficient")


def _position_points(position: int, coefficient: float | None) -> float:
    if coefficient is None:
        return 0.0
    return calculate_formula_points(position, coefficient, settings.MAX_POSITIONS)


@router.get("/{position_id}", response_model=PositionResponse)
def get_position(position_id: str, client: Client = Depends(get_supabase)):
    """Get a specific position by ID."""
    try:
        response = (
            client.table("positions")
            .select("id, tournament_id, team_id, position, points")
            .eq("id", position_id)
            .execute()
        )
    except Exception as e:
        raise service_error(e, f"Error fetching position {position_id}")

    if not response.data:
        raise HTTPException(status_code=404, detail="Position not found")
    return response.data[0]


@router.post("", response_model=PositionResponse, status_code=status.HTTP_201_CREATED)
def create_position(
    position_in: PositionCreate,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase),
):
    """Record a team's finishing position in a tournament. Admin only."""
    try:
        tournament = (
            client.table("tournaments")
            .select("id")
            .eq("id", position_in.tournament_id)
            .execute()
        )
        team = (
            client.table("teams")
            .select("id, region_id, regions(coefficient)")
            .eq("id", position_in.team_id)
            .execute()
        )
        existing = (
            client.table("positions")
            .select("id")
            .eq("team_id", position_in.team_id)
            .eq("tournament_id", position_in.tournament_id)
            .execute()
        )
    except Exception as e:
        raise service_error(e, "Error checking position references")

    if not tournament.data:
        raise HTTPException(status_code=404, detail="Tournament not found")
    if not team.data:
        raise HTTPException(status_code=404, detail="Team not found")
    if existing.data:
        raise HTTPException(
            status_code=409,
            detail="This team already has a position in this tournament",
        )

    points = _position_points(position_in.position, _team_coefficient(team.data[0]))

    try:
        response = (
            client.table("positions")
            .insert(
                {
                    "tournament_id": position_in.tournament_id,
                    "team_id": position_in.team_id,
                    "position": position_in.position,
                    "points": points,
                }
            )
            .execute()
        )
    except Exception as e:
        raise service_error(e, "Error creating position")

    if not response.data:
        raise HTTPException(status_code=500, detail="Failed to create position")

    logger.info(
        f"Position {position_in.position} for team {position_in.team_id} in "
        f"tournament {position_in.tournament_id} recorded by {user_id} ({points} points)"
    )
    return response.data[0]


@router.put("/{position_id}", response_model=PositionResponse)
def update_position(
    position_id: str,
    position_in: PositionUpdate,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase),
):
    """Change a recorded position and recompute its points. Admin only."""
    try:
        existing = (
            client.table("positions")
            .select("id, team_id, teams(region_id, regions(coefficient))")
            .eq("id", position_id)
            .execute()
        )
    except Exception as e:
        raise service_error(e, f"Error fetching position {position_id}")

    if not existing.data:
        raise HTTPException(status_code=404, detail="Position not found")

    team = existing.data[0].get("teams") or {}
    points = _position_points(position_in.position, _team_coefficient(team))

    try:
        response = (
            client.table("positions")
            .update({"position": position_in.position, "points": points})
            .eq("id", position_id)
            .execute()
        )
    except Exception as e:
        raise service_error(e, f"Error updating position {position_id}")

    if not response.data:
        raise HTTPException(status_code=500, detail="Failed to update position")

    logger.info(f"Position {position_id} updated by {user_id} ({points} points)")
    return response.data[0]
