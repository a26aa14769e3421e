"""
Supabase access for the ranking pipeline.

Loads tournament positions as plain TeamResult records, runs the ranking
computation and writes the outcome back (history rows, region coefficients).
"""

import logging
from typing import Any, Optional

from app.schemas.configuration import RankingConfig
from app.schemas.ranking import (
    RankingCalculation,
    RankingEntry,
    RegionSummary,
    TeamResult,
    TeamSummary,
)
from app.services.configuration import load_ranking_config
from app.services.ranking import build_ranking_entries, rank_teams, ranking_years
from app.services.scoring import (
    CE_TIERS,
    InvalidResultError,
    calculate_region_coefficients,
    calculate_region_points,
    calculate_regional_coefficient,
)
from pydantic import ValidationError
from supabase import Client

logger = logging.getLogger(__name__)

POSITION_COLUMNS = "id, team_id, position, tournaments!inner(type, year), teams!inner(region_id)"


def _to_team_result(row: dict) -> TeamResult:
    tournament = row.get("tournaments") or {}
    team = row.get("teams") or {}
    region_id = team.get("region_id")
    try:
        return TeamResult(
            team_id=str(row["team_id"]),
            region_id=str(region_id) if region_id is not None else None,
            tier=tournament.get("type"),
            year=tournament.get("year"),
            position=row["position"],
        )
    except ValidationError as e:
        raise InvalidResultError(f"Invalid position record {row.get('id')}: {e}") from e


def _to_region_summary(region: Optional[dict]) -> Optional[RegionSummary]:
    if not region:
        return None
    return RegionSummary(
        id=str(region["id"]), name=region.get("name", ""), code=region.get("code")
    )


def fetch_team_results(client: Client, years: list[int]) -> list[TeamResult]:
    """Get every tournament position from the given seasons."""
    response = (
        client.table("positions")
        .select(POSITION_COLUMNS)
        .in_("tournaments.year", years)
        .execute()
    )
    return [_to_team_result(row) for row in (response.data or [])]


def fetch_region_results(client: Client, region_id: str, year: int) -> list[TeamResult]:
    """Get CE1/CE2 positions of a region's teams in one season."""
    response = (
        client.table("positions")
        .select(POSITION_COLUMNS)
        .eq("teams.region_id", region_id)
        .eq("tournaments.year", year)
        .in_("tournaments.type", list(CE_TIERS))
        .execute()
    )
    return [_to_team_result(row) for row in (response.data or [])]


def fetch_teams(client: Client) -> dict[str, TeamSummary]:
    """Get all teams with their region, keyed by team id."""
    response = (
        client.table("teams")
        .select("id, name, club, region_id, regions(id, name, code)")
        .execute()
    )

    teams = {}
    for row in response.data or []:
        team_id = str(row["id"])
        teams[team_id] = TeamSummary(
            id=team_id,
            name=row.get("name", "Unknown"),
            club=row.get("club"),
            region=_to_region_summary(row.get("regions")),
        )
    return teams


def fetch_region_ids(client: Client) -> list[str]:
    response = client.table("regions").select("id").execute()
    return [str(row["id"]) for row in response.data or []]


def update_region_coefficient(client: Client, region_id: str, coefficient: float) -> None:
    client.table("regions").update({"coefficient": coefficient}).eq(
        "id", region_id
    ).execute()


def calculate_ranking(
    client: Client,
    current_year: int,
    config: Optional[RankingConfig] = None,
    results: Optional[list[TeamResult]] = None,
) -> list[RankingEntry]:
    """Compute the live ranking from the stored positions."""
    if config is None:
        config = load_ranking_config(client)
    if results is None:
        results = fetch_team_results(client, ranking_years(config, current_year))

    teams = fetch_teams(client)
    team_regions = {
        team_id: team.region.id for team_id, team in teams.items() if team.region
    }

    ranked = rank_teams(results, config, current_year, team_regions=team_regions)
    return build_ranking_entries(ranked, teams)


def save_ranking_history(
    client: Client, ranking: list[RankingEntry], year: int
) -> None:
    """Replace the stored ranking snapshot for a season."""
    client.table("ranking_history").delete().eq("year", year).execute()

    records = [
        {
            "team_id": entry.team.id,
            "year": year,
            "points": entry.total_points,
            "rank": entry.rank,
            "details": {
                str(y): calc.model_dump() for y, calc in entry.year_breakdown.items()
            },
        }
        for entry in ranking
    ]
    if records:
        client.table("ranking_history").insert(records).execute()


def fetch_ranking_history(client: Client, year: int) -> list[RankingEntry]:
    """Get the stored ranking snapshot for a season."""
    response = (
        client.table("ranking_history")
        .select("team_id, rank, points, details, teams(id, name, club, regions(id, name, code))")
        .eq("year", year)
        .order("rank")
        .execute()
    )

    entries = []
    for row in response.data or []:
        team = row.get("teams") or {}
        details: dict[str, Any] = row.get("details") or {}
        entries.append(
            RankingEntry(
                rank=row["rank"],
                team=TeamSummary(
                    id=str(row["team_id"]),
                    name=team.get("name", "Unknown"),
                    club=team.get("club"),
                    region=_to_region_summary(team.get("regions")),
                ),
                total_points=row["points"],
                year_breakdown={
                    int(y): RankingCalculation.model_validate(calc)
                    for y, calc in details.items()
                },
            )
        )
    return entries


def recalculate_ranking(client: Client, current_year: int) -> list[RankingEntry]:
    """
    Recompute the ranking and persist it.

    Stores the season's history snapshot and writes the current season's
    coefficient back to every region. Regions without CE results this season
    get the floor.
    """
    logger.info(f"Recalculating ranking for {current_year}...")
    config = load_ranking_config(client)

    results = fetch_team_results(client, ranking_years(config, current_year))
    ranking = calculate_ranking(client, current_year, config, results)

    coefficients = calculate_region_coefficients(results, config)
    floor = calculate_regional_coefficient(0, config.regional_coefficient)
    region_ids = set(fetch_region_ids(client)) | {
        region_id for region_id, year in coefficients if year == current_year
    }
    for region_id in sorted(region_ids):
        coefficient = coefficients.get((region_id, current_year), floor)
        update_region_coefficient(client, region_id, coefficient)

    save_ranking_history(client, ranking, current_year)

    logger.info(f"Ranking recalculated: {len(ranking)} teams processed")
    return ranking


def recalculate_region_coefficient(
    client: Client, region_id: str, year: int
) -> tuple[float, float]:
    """Recompute and store one region's coefficient; returns (points, coefficient)."""
    config = load_ranking_config(client)
    results = fetch_region_results(client, region_id, year)

    total_points = calculate_region_points(results, config).get((region_id, year), 0)
    coefficient = calculate_regional_coefficient(
        total_points, config.regional_coefficient
    )
    update_region_coefficient(client, region_id, coefficient)

    logger.info(
        f"Region {region_id} coefficient for {year}: {coefficient:.3f} "
        f"({total_points} points)"
    )
    return total_points, coefficient
