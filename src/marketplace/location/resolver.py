"""Fulfillment location resolution.

Picks the store location that prepares a group of cart items:

    1. the location named in the cart, taken as-is
    2. the location ranked best by the get_fulfillment_location procedure
    3. the store's primary location
    4. none: the order goes ahead without a pickup address

Each path is tried once. A failing ranking procedure counts as "no result".
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.location.location import StoreLocation
from marketplace.procedures import ProcedureError, get_procedures

logger = structlog.get_logger(__name__)

FULFILLMENT_TYPE_DELIVERY = "delivery"


def _fetch_location(location_id: str) -> StoreLocation | None:
    try:
        return current_domain.repository_for(StoreLocation).get(location_id)
    except ObjectNotFoundError:
        logger.warning("Store location not found", location_id=location_id)
        return None


def _primary_location(store_id: str) -> StoreLocation | None:
    repo = current_domain.repository_for(StoreLocation)
    results = repo._dao.query.filter(store_id=store_id, is_primary=True).all()
    return results.first if results.items else None


def _ranked_location_id(
    store_id: str,
    product_ids: list[str],
    latitude: float | None,
    longitude: float | None,
) -> str | None:
    try:
        return get_procedures().get_fulfillment_location(
            store_id=store_id,
            product_ids=product_ids,
            customer_lat=latitude,
            customer_lng=longitude,
            fulfillment_type=FULFILLMENT_TYPE_DELIVERY,
        )
    except ProcedureError as exc:
        logger.warning(
            "Fulfillment location ranking failed, falling back to primary location",
            store_id=store_id,
            error=str(exc),
        )
        return None


def resolve_fulfillment_location(
    store_id: str,
    product_ids: list[str],
    location_id: str | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
) -> StoreLocation | None:
    """Return the location that should fulfill the given products, if any."""
    if location_id:
        return _fetch_location(location_id)

    # Distinct ids, first-seen order
    distinct_ids = list(dict.fromkeys(product_ids))

    ranked_id = _ranked_location_id(store_id, distinct_ids, latitude, longitude)
    if ranked_id:
        return _fetch_location(ranked_id)

    location = _primary_location(store_id)
    if location is None:
        logger.warning("No fulfillment location resolved for store", store_id=store_id)
    return location
