#!/usr/bin/env python3
"""
Trigger a ranking recalculation through the API.

Usage:
    python recalculate_ranking.py [TOKEN]

Recalculates the ranking for the current season, refreshes the region
coefficients and prints the top of the table.
"""

import asyncio
import os

import httpx

# API configuration - update if your API is running on a different port
API_BASE = os.getenv("FEDV_API_BASE", "http://localhost:8000/api/v1")

# Admin JWT token from Supabase auth ("Bearer eyJ...")
# Get this from your browser's dev tools after logging in to the admin panel
AUTH_TOKEN = os.getenv("FEDV_AUTH_TOKEN", "")


async def recalculate_ranking(token: str, top: int = 10) -> int:
    """Ask the API to recalculate the ranking and print the leaders."""
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = token

    async with httpx.AsyncClient(timeout=60.0) as client:
        print("\n🔄 Recalculating ranking...")

        try:
            response = await client.post(
                f"{API_BASE}/ranking/recalculate", headers=headers
            )
        except httpx.HTTPError as e:
            print(f"   ❌ Error: {e}")
            return 1

        if response.status_code != 200:
            print(f"   ❌ Failed: {response.status_code} - {response.text}")
            return 1

        data = response.json()
        print(f"   ✅ {data['total_teams']} teams ranked")
        for entry in data["ranking"][:top]:
            print(
                f"   {entry['rank']:>3}. {entry['team']['name']:<30} "
                f"{entry['total_points']:>9.2f}"
            )

    return 0


if __name__ == "__main__":
    import sys

    token = sys.argv[1] if len(sys.argv) > 1 else AUTH_TOKEN

    print("🏐 FEDV Ranking Recalculation")
    print("=" * 40)

    exit_code = asyncio.run(recalculate_ranking(token))

    print("\n✨ Done!")
    sys.exit(exit_code)
