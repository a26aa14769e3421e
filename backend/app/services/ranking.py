import logging
from collections import defaultdict
from datetime import datetime
from typing import Iterable, Optional

from app.schemas.configuration import RankingConfig
from app.schemas.ranking import (
    RankedTeam,
    RankingCalculation,
    RankingEntry,
    RankingStats,
    RegionStats,
    TeamRankingResult,
    TeamResult,
    TeamSummary,
)
from app.services.scoring import (
    CE_TIERS,
    InvalidResultError,
    calculate_region_coefficients,
    calculate_table_points,
    get_points_for_position,
    get_temporal_weight,
)

logger = logging.getLogger(__name__)

TOP_TEAMS_COUNT = 10


def ranking_years(config: RankingConfig, current_year: int) -> list[int]:
    """Seasons that carry a temporal weight, newest first."""
    return [current_year - offset for offset in sorted(config.temporal_weights)]


def _check_not_future(results: list[TeamResult], current_year: int) -> None:
    for result in results:
        if result.year > current_year:
            raise InvalidResultError(
                f"Result for team {result.team_id} is from {result.year}, "
                f"after the current season {current_year}"
            )


def calculate_team_ranking(
    team_id: str,
    results: Iterable[TeamResult],
    config: RankingConfig,
    current_year: int,
    region_coefficients: dict[tuple[Optional[str], int], float],
    region_id: Optional[str] = None,
) -> TeamRankingResult:
    """
    Sum a team's weighted points over every season that still carries weight.

    Seasons without a temporal weight are left out of both the total and the
    breakdown.
    """
    results = list(results)
    _check_not_future(results, current_year)
    floor = config.regional_coefficient.floor

    by_year: dict[int, list[TeamResult]] = defaultdict(list)
    for result in results:
        by_year[result.year].append(result)

    total_points = 0.0
    year_breakdown: dict[int, RankingCalculation] = {}

    for year in sorted(by_year, reverse=True):
        year_offset = current_year - year
        year_results = by_year[year]
        owning_region = region_id or year_results[0].region_id
        coefficient = region_coefficients.get((owning_region, year), floor)

        result_points = [
            calculate_table_points(
                config, result.tier, result.position, year_offset, coefficient
            )
            for result in year_results
        ]
        if result_points[0] is None:
            continue
        weighted_points = sum(result_points)

        # Unweighted base points, kept for the breakdown
        ce_points = 0
        regional_points = 0
        for result in year_results:
            points = get_points_for_position(config, result.tier, result.position)
            if result.tier in CE_TIERS:
                ce_points += points
            else:
                regional_points += points

        year_breakdown[year] = RankingCalculation(
            team_id=team_id,
            year=year,
            ce_points=ce_points,
            regional_points=regional_points,
            regional_coefficient=coefficient,
            temporal_weight=get_temporal_weight(config, year_offset),
            weighted_points=weighted_points,
        )
        total_points += weighted_points

    return TeamRankingResult(
        team_id=team_id,
        region_id=region_id or (results[0].region_id if results else None),
        total_points=total_points,
        year_breakdown=year_breakdown,
    )


def rank_teams(
    results: Iterable[TeamResult],
    config: RankingConfig,
    current_year: int,
    team_regions: Optional[dict[str, str]] = None,
) -> list[RankedTeam]:
    """
    Rank every team by total weighted points.

    Ties are broken by team id so identical input always yields the same
    order; ranks are 1..N with no shared numbers. Teams in `team_regions`
    without results are ranked with zero points.
    """
    results = list(results)
    _check_not_future(results, current_year)
    team_regions = team_regions or {}

    region_coefficients = calculate_region_coefficients(results, config)

    results_by_team: dict[str, list[TeamResult]] = defaultdict(list)
    for result in results:
        results_by_team[result.team_id].append(result)

    team_ids = set(results_by_team) | set(team_regions)
    team_results = [
        calculate_team_ranking(
            team_id,
            results_by_team.get(team_id, []),
            config,
            current_year,
            region_coefficients,
            region_id=team_regions.get(team_id),
        )
        for team_id in team_ids
    ]

    team_results.sort(key=lambda r: (-r.total_points, r.team_id))
    logger.debug(
        f"Ranked {len(team_results)} teams from {len(results)} results for {current_year}"
    )

    return [
        RankedTeam(rank=i + 1, **result.model_dump())
        for i, result in enumerate(team_results)
    ]


def build_ranking_entries(
    ranked: list[RankedTeam], teams: dict[str, TeamSummary]
) -> list[RankingEntry]:
    """Attach team and region details to a computed ranking."""
    entries = []
    for team in ranked:
        summary = teams.get(team.team_id) or TeamSummary(
            id=team.team_id, name="Unknown"
        )
        entries.append(
            RankingEntry(
                rank=team.rank,
                team=summary,
                total_points=team.total_points,
                year_breakdown=team.year_breakdown,
            )
        )
    return entries


def filter_ranking(
    entries: list[RankingEntry],
    region_id: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> list[RankingEntry]:
    """Filter by region and paginate; entries keep their global rank."""
    filtered = entries
    if region_id:
        filtered = [
            e for e in filtered if e.team.region and e.team.region.id == region_id
        ]
    if limit is not None:
        filtered = filtered[offset : offset + limit]
    elif offset:
        filtered = filtered[offset:]
    return filtered


def get_ranking_stats(entries: list[RankingEntry], year: int) -> RankingStats:
    """Summary figures for a ranking: averages, top teams, region breakdown."""
    region_breakdown: dict[str, RegionStats] = {}
    for entry in entries:
        region_name = entry.team.region.name if entry.team.region else "Unknown"
        stats = region_breakdown.setdefault(region_name, RegionStats(name=region_name))
        stats.teams += 1
        stats.total_points += entry.total_points

    for stats in region_breakdown.values():
        stats.average_points = stats.total_points / stats.teams

    average_points = 0.0
    if entries:
        average_points = sum(e.total_points for e in entries) / len(entries)

    return RankingStats(
        total_teams=len(entries),
        year=year,
        last_updated=datetime.now(),
        top_teams=entries[:TOP_TEAMS_COUNT],
        region_breakdown=region_breakdown,
        average_points=average_points,
    )
