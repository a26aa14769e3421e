"""
Ranking configuration storage.

The configuration lives in the `configuration` table as a single JSON row.
When no row exists the official defaults apply.
"""

import logging
from typing import Any

from app.core.config import settings
from app.schemas.configuration import (
    ConfigValidationReport,
    RankingConfig,
    RankingConfigUpdate,
)
from app.services.scoring import RankingConfigError
from pydantic import ValidationError
from pydantic.alias_generators import to_camel
from supabase import Client

logger = logging.getLogger(__name__)

POINTS_TABLES = {
    "ce1_points": "CE1",
    "ce2_points": "CE2",
    "regional_points": "Regional",
}


def _format_errors(error: ValidationError) -> list[str]:
    messages = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"])
        messages.append(f"{location}: {err['msg']}" if location else err["msg"])
    return messages


def parse_ranking_config(raw: dict[str, Any]) -> RankingConfig:
    """Validate a stored configuration value."""
    try:
        return RankingConfig.model_validate(raw)
    except ValidationError as e:
        raise RankingConfigError(
            "Invalid ranking configuration: " + "; ".join(_format_errors(e))
        ) from e


def fetch_stored_config(client: Client) -> dict[str, Any] | None:
    """Get the raw stored configuration, or None if never saved."""
    response = (
        client.table("configuration")
        .select("value")
        .eq("key", settings.RANKING_CONFIG_KEY)
        .execute()
    )
    if not response.data:
        return None
    return response.data[0]["value"]


def load_ranking_config(client: Client) -> RankingConfig:
    """Get the active configuration, falling back to the defaults."""
    raw = fetch_stored_config(client)
    if raw is None:
        logger.debug("No stored ranking configuration, using defaults")
        return RankingConfig()
    return parse_ranking_config(raw)


def save_ranking_config(client: Client, config: RankingConfig) -> RankingConfig:
    client.table("configuration").upsert(
        {
            "key": settings.RANKING_CONFIG_KEY,
            "value": config.model_dump(mode="json"),
        },
        on_conflict="key",
    ).execute()
    logger.info("Ranking configuration saved")
    return config


def merge_ranking_config(
    current: RankingConfig, update: RankingConfigUpdate
) -> RankingConfig:
    """Apply a partial update and re-validate the result."""
    merged = current.model_dump()
    merged.update(update.model_dump(exclude_none=True))
    return parse_ranking_config(merged)


def validate_ranking_config(raw: dict[str, Any] | None) -> ConfigValidationReport:
    """Check a stored configuration without raising."""
    if raw is None:
        return ConfigValidationReport(
            is_valid=True, message="Default configuration is valid"
        )

    errors: list[str] = []
    warnings: list[str] = []

    try:
        RankingConfig.model_validate(raw)
    except ValidationError as e:
        errors.extend(_format_errors(e))

    for field, label in POINTS_TABLES.items():
        table = raw.get(field, raw.get(to_camel(field)))
        if not isinstance(table, dict) or not table:
            continue
        try:
            first_position = min(int(position) for position in table)
        except ValueError:
            continue
        if first_position != 1:
            warnings.append(f"{label} points table does not start at position 1")

    return ConfigValidationReport(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        message="Configuration is valid" if not errors else "Configuration has errors",
    )
