# Schemas package
from app.schemas.configuration import (
    ConfigValidationReport,
    RankingConfig,
    RankingConfigUpdate,
    RegionalCoefficientConfig,
)
from app.schemas.position import PositionCreate, PositionResponse, PositionUpdate
from app.schemas.ranking import (
    RankedTeam,
    RankingCalculation,
    RankingEntry,
    RankingStats,
    TeamRankingResult,
    TeamResult,
)
from app.schemas.region import CoefficientResponse, RegionResponse

__all__ = [
    "RankingConfig",
    "RankingConfigUpdate",
    "RegionalCoefficientConfig",
    "ConfigValidationReport",
    "TeamResult",
    "RankingCalculation",
    "TeamRankingResult",
    "RankedTeam",
    "RankingEntry",
    "RankingStats",
    "RegionResponse",
    "CoefficientResponse",
    "PositionCreate",
    "PositionUpdate",
    "PositionResponse",
]
