from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.configuration import Tier


class TeamResult(BaseModel):
    """One finishing position of one team in one tournament."""

    team_id: str
    region_id: Optional[str] = None
    tier: Tier
    year: int
    position: int = Field(..., ge=1)

    model_config = {"frozen": True}


class RankingCalculation(BaseModel):
    """Per (team, year) breakdown kept for display and audit."""

    team_id: str
    year: int
    ce_points: float
    regional_points: float
    regional_coefficient: float
    temporal_weight: float
    weighted_points: float


class TeamRankingResult(BaseModel):
    team_id: str
    region_id: Optional[str] = None
    total_points: float = 0.0
    year_breakdown: dict[int, RankingCalculation] = {}


class RankedTeam(TeamRankingResult):
    rank: int


class RegionSummary(BaseModel):
    id: str
    name: str
    code: Optional[str] = None


class TeamSummary(BaseModel):
    id: str
    name: str
    club: Optional[str] = None
    region: Optional[RegionSummary] = None


class RankingEntry(BaseModel):
    """A ranked team as served to the frontend."""

    rank: int
    team: TeamSummary
    total_points: float
    year_breakdown: dict[int, RankingCalculation] = {}


class RegionStats(BaseModel):
    name: str
    teams: int = 0
    total_points: float = 0.0
    average_points: float = 0.0


class RankingStats(BaseModel):
    total_teams: int
    year: int
    last_updated: datetime
    top_teams: list[RankingEntry] = []
    region_breakdown: dict[str, RegionStats] = {}
    average_points: float = 0.0


class RecalculateResponse(BaseModel):
    ranking: list[RankingEntry]
    total_teams: int
    recalculated_at: datetime


class HistoryResponse(BaseModel):
    year: int
    ranking: list[RankingEntry]
    total_teams: int


class EvolutionPoint(BaseModel):
    year: int
    rank: int
    points: float


class EvolutionResponse(BaseModel):
    team_id: str
    evolution: list[EvolutionPoint] = []
