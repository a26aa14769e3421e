# FEDV ranking scoring rules
# Base points by tier and position, temporal decay, regional coefficient

from typing import Iterable, Optional

from app.schemas.configuration import RankingConfig, RegionalCoefficientConfig
from app.schemas.ranking import TeamResult

# Field size used by the manual position entry formula
DEFAULT_MAX_POSITIONS = 20

# Tiers that feed a region's aggregate strength
CE_TIERS = ("CE1", "CE2")


class RankingConfigError(ValueError):
    """Raised when the ranking configuration is unusable."""


class InvalidResultError(ValueError):
    """Raised when a position or year offset is not a valid input."""


def _require_positive_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidResultError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidResultError(f"{name} must be >= 1, got {value}")
    return value


def get_points_table(config: RankingConfig, tier: str) -> dict[int, int]:
    """Get the points table for a tournament tier."""
    tables = {
        "CE1": config.ce1_points,
        "CE2": config.ce2_points,
        "REGIONAL": config.regional_points,
    }
    if tier not in tables:
        raise RankingConfigError(f"Unknown tournament tier: {tier!r}")
    return tables[tier]


def get_points_for_position(config: RankingConfig, tier: str, position: int) -> int:
    """Get base points for a finishing position, 0 beyond the table."""
    table = get_points_table(config, tier)
    position = _require_positive_int(position, "position")
    return table.get(position, 0)


def get_temporal_weight(config: RankingConfig, year_offset: int) -> Optional[float]:
    """
    Get the decay weight for results `year_offset` seasons old.

    Returns None when the offset has no weight, so callers can drop the
    result instead of counting it at zero.
    """
    if isinstance(year_offset, bool) or not isinstance(year_offset, int):
        raise InvalidResultError(f"year offset must be an integer, got {year_offset!r}")
    if year_offset < 0:
        raise InvalidResultError(f"year offset must be >= 0, got {year_offset}")
    return config.temporal_weights.get(year_offset)


def calculate_regional_coefficient(
    total_region_points: float, coefficient_config: RegionalCoefficientConfig
) -> float:
    """Clamp floor + points * increment into [floor, ceiling]."""
    floor = coefficient_config.floor
    ceiling = coefficient_config.ceiling
    raw = floor + total_region_points * coefficient_config.increment
    return max(floor, min(ceiling, raw))


def calculate_region_points(
    results: Iterable[TeamResult], config: RankingConfig
) -> dict[tuple[str, int], float]:
    """Sum CE1 + CE2 base points per (region_id, year), skipping teams without a region."""
    totals: dict[tuple[str, int], float] = {}
    for result in results:
        if result.region_id is None:
            continue
        key = (result.region_id, result.year)
        totals.setdefault(key, 0)
        if result.tier in CE_TIERS:
            totals[key] += get_points_for_position(config, result.tier, result.position)
    return totals


def calculate_region_coefficients(
    results: Iterable[TeamResult], config: RankingConfig
) -> dict[tuple[str, int], float]:
    """Coefficient for every (region_id, year) that appears in the results."""
    return {
        key: calculate_regional_coefficient(points, config.regional_coefficient)
        for key, points in calculate_region_points(results, config).items()
    }


def calculate_table_points(
    config: RankingConfig,
    tier: str,
    position: int,
    year_offset: int,
    region_coefficient: float = 1.0,
) -> Optional[float]:
    """
    Weighted points for one result using the configured points tables.

    Only REGIONAL results are multiplied by the region coefficient. Returns
    None when the result is too old to carry any weight.
    """
    weight = get_temporal_weight(config, year_offset)
    if weight is None:
        return None

    base_points = get_points_for_position(config, tier, position)
    if tier == "REGIONAL":
        return base_points * region_coefficient * weight
    return base_points * weight


def calculate_formula_points(
    position: int, coefficient: float, max_positions: int = DEFAULT_MAX_POSITIONS
) -> float:
    """
    Points for a manually entered position: (field size - position + 1)
    times the region coefficient, never less than one base point.
    """
    position = _require_positive_int(position, "position")
    base_points = max(1, max_positions - position + 1)
    return base_points * coefficient
