"""
Ranking configuration endpoints: points tables, temporal weights and the
regional coefficient settings.
"""

import logging
from datetime import datetime

from app.core.auth import get_current_user_id
from app.core.errors import service_error
from app.db.supabase import get_supabase
from app.schemas.configuration import (
    ConfigBackup,
    ConfigRestore,
    ConfigValidationReport,
    RankingConfig,
    RankingConfigUpdate,
)
from app.services.configuration import (
    fetch_stored_config,
    load_ranking_config,
    merge_ranking_config,
    parse_ranking_config,
    save_ranking_config,
    validate_ranking_config,
)
from fastapi import APIRouter, Depends
from supabase import Client

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=RankingConfig)
def get_configuration(client: Client = Depends(get_supabase)):
    """Get the active ranking configuration (defaults if none is stored)."""
    try:
        return load_ranking_config(client)
    except Exception as e:
        raise service_error(e, "Error loading ranking configuration")


@router.put("", response_model=RankingConfig)
def update_configuration(
    config_in: RankingConfigUpdate,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase),
):
    """Replace any subset of the configuration sections. Admin only."""
    try:
        current = load_ranking_config(client)
        config = merge_ranking_config(current, config_in)
        save_ranking_config(client, config)
    except Exception as e:
        raise service_error(e, "Error updating ranking configuration")

    logger.info(f"Ranking configuration updated by {user_id}")
    return config


@router.post("/reset", response_model=RankingConfig)
def reset_configuration(
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase),
):
    """Restore the official default configuration. Admin only."""
    try:
        config = save_ranking_config(client, RankingConfig())
    except Exception as e:
        raise service_error(e, "Error resetting ranking configuration")

    logger.info(f"Ranking configuration reset to defaults by {user_id}")
    return config


@router.get("/validate", response_model=ConfigValidationReport)
def validate_configuration(client: Client = Depends(get_supabase)):
    """Check the stored configuration and report errors and warnings."""
    try:
        raw = fetch_stored_config(client)
    except Exception as e:
        raise service_error(e, "Error loading ranking configuration")
    return validate_ranking_config(raw)


@router.get("/backup", response_model=ConfigBackup)
def backup_configuration(
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase),
):
    """Export the stored configuration. Admin only."""
    try:
        raw = fetch_stored_config(client)
        configuration = parse_ranking_config(raw) if raw is not None else None
    except Exception as e:
        raise service_error(e, "Error exporting ranking configuration")

    return ConfigBackup(
        timestamp=datetime.now().isoformat(),
        configuration=configuration,
    )


@router.post("/restore", response_model=RankingConfig)
def restore_configuration(
    backup: ConfigRestore,
    user_id: str = Depends(get_current_user_id),
    client: Client = Depends(get_supabase),
):
    """Restore a configuration exported by /backup. Admin only."""
    try:
        config = save_ranking_config(client, backup.configuration)
    except Exception as e:
        raise service_error(e, "Error restoring ranking configuration")

    logger.info(f"Ranking configuration restored by {user_id}")
    return config
