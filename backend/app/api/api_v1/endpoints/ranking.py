"""
Ranking API endpoints: the live ranking, stored history and recalculation.
"""

import logging
from datetime import datetime
from typing import Optional

from app.core.auth import get_current_user_id
from app.core.config import get_current_season
from app.core.errors import service_error
from app.db.supabase import get_supabase
from app.schemas.ranking import (
    EvolutionPoint,
    EvolutionResponse,
    HistoryResponse,
    RankingEntry,
    RankingStats,
    RecalculateResponse,
)
from app.services.ranking import filter_ranking, get_ranking_stats
from app.services.ranking_data import (
    calculate_ranking,
    fetch_ranking_history,
    recalculate_ranking,
)
from fastapi import APIRouter, Depends, HTTPException, Query
from supabase import Client

logger = logging.getLogger(__name__)
router = APIRouter()

# Upper bound for the /top endpoint
MAX_TOP_TEAMS = 50


def _load_ranking(
    client: Client, current_season: int, year: Optional[int] = None
) -> list[RankingEntry]:
    """Live ranking for the current season, stored history for past ones."""
    try:
        if year is not None and year != current_season:
            return fetch_ranking_history(client, year)
        return calculate_ranking(client, current_season)
    except Exception as e:
        raise service_error(e, f"Error loading ranking for {year or current_season}")


@router.get("", response_model=list[RankingEntry])
def get_ranking(
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Season year"),
    region_id: Optional[str] = Query(None, description="Only teams of this region"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    client: Client = Depends(get_supabase),
    current_season: int = Depends(get_current_season),
):
    """
    Get the team ranking.

    Filters are applied after ranking, so every entry keeps its global rank.
    """
    ranking = _load_ranking(client, current_season, year)
    return filter_ranking(ranking, region_id=region_id, limit=limit, offset=offset)


@router.get("/stats", response_model=RankingStats)
def get_stats(
    client: Client = Depends(get_supabase),
    current_season: int = Depends(get_current_season),
):
    """Get summary statistics of the current ranking."""
    ranking = _load_ranking(client, current_season)
    return get_ranking_stats(ranking, current_season)


@router.get("/top", response_model=list[RankingEntry])
def get_top_teams(
    limit: int = Query(10, ge=1),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    client: Client = Depends(get_supabase),
    current_season: int = Depends(get_current_season),
):
    """Get the top N teams (at most 50)."""
    ranking = _load_ranking(client, current_season, year)
    return ranking[: min(limit, MAX_TOP_TEAMS)]


@router.get("/history", response_model=HistoryResponse)
def get_history(
    year: int = Query(..., ge=2000, le=2100, description="Season year"),
    client: Client = Depends(get_supabase),
    current_season: int = Depends(get_current_season),
):
    """Get the ranking of a given season."""
    ranking = _load_ranking(client, current_season, year)
    return HistoryResponse(year=year, ranking=ranking, total_teams=len(ranking))


@router.get("/team/{team_id}", response_model=RankingEntry)
def get_team_ranking(
    team_id: str,
    year: Optional[int] = Query(None, ge=2000, le=2100),
    client: Client = Depends(get_supabase),
    current_season: int = Depends(get_current_season),
):
    """Get the ranking entry of a single team."""
    ranking = _load_ranking(client, current_season, year)
    for entry in ranking:
        if entry.team.id == team_id:
            return entry
    raise HTTPException(status_code=404, detail="Team not found in ranking")


@router.get("/region/{region_id}", response_model=list[RankingEntry])
def get_region_ranking(
    region_id: str,
    year: Optional[int] = Query(None, ge=2000, le=2100),
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    client: Client = Depends(get_supabase),
    current_season: int = Depends(get_current_season),
):
    """Get the ranking restricted to the teams of one region."""
    ranking = _load_ranking(client, current_season, year)
    return filter_ranking(ranking, region_id=region_id, limit=limit, offset=offset)


@router.get("/evolution/{team_id}", response_model=EvolutionResponse)
def get_team_evolution(
    team_id: str,
    years: int = Query(4, ge=1, le=10),
    client: Client = Depends(get_supabase),
    current_season: int = Depends(get_current_season),
):
    """Get a team's rank and points over the last seasons, oldest first."""
    evolution = []
    for year in range(current_season - years + 1, current_season + 1):
        ranking = _load_ranking(client, current_season, year)
        entry = next((e for e in ranking if e.team.id == team_id), None)
        if entry is None:
            logger.debug(f"No ranking entry for team {team_id} in {year}")
            continue
        evolution.append(
            EvolutionPoint(year=year, rank=entry.rank, points=entry.total_points)
        )

    return EvolutionResponse(team_id=team_id, evolution=evolution)


@router.post("/recalculate", response_model=RecalculateResponse)
def recalculate(
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase),
    current_season: int = Depends(get_current_season),
):
    """
    Recalculate the ranking, store the season snapshot and refresh the
    region coefficients. Admin only.
    """
    logger.info(f"Ranking recalculation requested by {user_id}")
    try:
        ranking = recalculate_ranking(client, current_season)
    except Exception as e:
        raise service_error(e, "Error recalculating ranking")

    return RecalculateResponse(
        ranking=ranking,
        total_teams=len(ranking),
        recalculated_at=datetime.now(),
    )
