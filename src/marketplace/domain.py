"""Marketplace bounded context — checkout fan-out and delivery dispatch.

Splits multi-store carts into per-store orders, resolves the fulfilling
store location, and hands each order to a delivery company. Stored
procedures owned by the database are reached through the procedure gateway.
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

marketplace = Domain(name="marketplace")
