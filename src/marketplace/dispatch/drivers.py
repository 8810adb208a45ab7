"""Driver position lookup for the dispatch map."""

import structlog

from marketplace.procedures import ProcedureError, get_procedures

logger = structlog.get_logger(__name__)


def driver_locations(driver_ids: list[str]) -> dict[str, dict]:
    """Map driver ids to their last known coordinates.

    Drivers without a known position are left out. A failing procedure
    yields an empty mapping.
    """
    if not driver_ids:
        return {}

    try:
        locations = get_procedures().get_driver_locations(list(driver_ids))
    except ProcedureError as exc:
        logger.warning("Driver location lookup failed", driver_count=len(driver_ids), error=str(exc))
        return {}

    return {loc.driver_id: {"lat": loc.lat, "lng": loc.lng} for loc in locations}
