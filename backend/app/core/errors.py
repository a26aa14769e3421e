import logging

from app.services.scoring import InvalidResultError, RankingConfigError
from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


def service_error(error: Exception, context: str) -> HTTPException:
    """Map a failure inside an endpoint to the HTTP error returned to the client."""
    if isinstance(error, (RankingConfigError, InvalidResultError)):
        logger.warning(f"{context}: {error}")
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))

    logger.error(f"{context}: {error}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Database temporarily unavailable",
    )
