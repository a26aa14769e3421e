#!/usr/bin/env python3
"""
CLI for the FEDV team ranking.

Usage:
    fedv-ranking recalculate                 # Recalculate and store the ranking
    fedv-ranking recalculate --year 2025     # Recalculate as of another season
    fedv-ranking show-config                 # Print the active configuration
    fedv-ranking validate-config             # Check the stored configuration
    fedv-ranking reset-config                # Restore the default configuration
"""

import argparse
import json
import logging
import sys

from app.core.config import get_current_season
from app.db.supabase import get_supabase
from app.schemas.configuration import RankingConfig
from app.services.configuration import (
    fetch_stored_config,
    load_ranking_config,
    save_ranking_config,
    validate_ranking_config,
)
from app.services.ranking_data import recalculate_ranking

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def run_command(args: argparse.Namespace) -> int:
    """Run a CLI command against the configured Supabase project."""
    client = get_supabase()
    year = args.year or get_current_season()

    if args.command == "recalculate":
        ranking = recalculate_ranking(client, year)
        print(f"\n✅ Ranking {year} recalculated: {len(ranking)} teams")
        for entry in ranking[: args.top]:
            region = entry.team.region.name if entry.team.region else "-"
            print(
                f"   {entry.rank:>3}. {entry.team.name:<30} {region:<20} "
                f"{entry.total_points:>9.2f}"
            )

    elif args.command == "show-config":
        config = load_ranking_config(client)
        print(json.dumps(config.model_dump(mode="json"), indent=2))

    elif args.command == "validate-config":
        report = validate_ranking_config(fetch_stored_config(client))
        print(f"\n{'✅' if report.is_valid else '❌'} {report.message}")
        for error in report.errors:
            print(f"   - {error}")
        for warning in report.warnings:
            print(f"   ⚠️  {warning}")
        return 0 if report.is_valid else 1

    elif args.command == "reset-config":
        if not args.yes:
            response = input("Reset the ranking configuration to defaults? (y/N): ")
            if response.strip().lower() != "y":
                print("Aborted.")
                return 1
        save_ranking_config(client, RankingConfig())
        print("\n✅ Configuration reset to defaults")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="FEDV Team Ranking - administration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fedv-ranking recalculate              # Recalculate for the current season
  fedv-ranking recalculate --top 20     # Print the 20 best teams
  fedv-ranking validate-config          # Check the stored configuration
  fedv-ranking reset-config --yes       # Restore defaults without asking
        """,
    )

    parser.add_argument(
        "command",
        choices=["recalculate", "show-config", "validate-config", "reset-config"],
        help="Command to run",
    )

    parser.add_argument(
        "--year",
        type=int,
        help="Season the ranking is computed for (default: current year)",
    )

    parser.add_argument(
        "--top",
        type=int,
        default=10,
        help="Number of teams to print after recalculating (default: 10)",
    )

    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Do not ask for confirmation",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        return run_command(args)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 1
    except Exception as e:
        logger.error(f"Command failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
