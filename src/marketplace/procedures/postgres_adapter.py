"""Postgres procedure adapter — calls the stored procedures through SQLAlchemy.

Each call runs in its own short transaction. Database errors are wrapped
in ProcedureError so callers only ever deal with one failure type.
"""

import json

import structlog
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from marketplace.procedures.port import DriverLocation, ProcedureError, ProcedureGateway

logger = structlog.get_logger(__name__)


class PostgresProcedures(ProcedureGateway):
    """Stored procedure adapter for a PostgreSQL backend."""

    def __init__(self, database_url: str, engine: Engine | None = None) -> None:
        self.database_url = database_url
        self.engine = engine or create_engine(database_url, pool_pre_ping=True)

    def _execute(self, procedure: str, statement: str, params: dict) -> list:
        try:
            with self.engine.begin() as conn:
                return conn.execute(text(statement), params).all()
        except SQLAlchemyError as exc:
            logger.error("Stored procedure call failed", procedure=procedure, error=str(exc))
            raise ProcedureError(procedure, str(exc)) from exc

    def get_fulfillment_location(
        self,
        store_id: str,
        product_ids: list[str],
        customer_lat: float | None,
        customer_lng: float | None,
        fulfillment_type: str,
    ) -> str | None:
        rows = self._execute(
            "get_fulfillment_location",
            "SELECT get_fulfillment_location("
            "p_store_id => :store_id, p_product_ids => :product_ids, "
            "p_customer_lat => :lat, p_customer_lng => :lng, "
            "p_fulfillment_type => :fulfillment_type)",
            {
                "store_id": store_id,
                "product_ids": list(product_ids),
                "lat": customer_lat,
                "lng": customer_lng,
                "fulfillment_type": fulfillment_type,
            },
        )
        location_id = rows[0][0] if rows else None
        return str(location_id) if location_id else None

    def decrement_inventory(self, inventory_id: str, quantity: int) -> None:
        self._execute(
            "decrement_inventory",
            "SELECT decrement_inventory(p_inventory_id => :inventory_id, p_quantity => :quantity)",
            {"inventory_id": inventory_id, "quantity": quantity},
        )

    def auto_assign_delivery(self, delivery_id: str) -> None:
        self._execute(
            "auto_assign_delivery",
            "SELECT auto_assign_delivery(p_delivery_id => :delivery_id)",
            {"delivery_id": delivery_id},
        )

    def create_notification(
        self,
        user_id: str,
        notification_type: str,
        title: str,
        body: str,
        action_url: str,
        data: dict,
    ) -> None:
        self._execute(
            "create_notification",
            "SELECT create_notification("
            "p_user_id => :user_id, p_type => :type, p_title => :title, "
            "p_body => :body, p_action_url => :action_url, p_data => CAST(:data AS jsonb))",
            {
                "user_id": user_id,
                "type": notification_type,
                "title": title,
                "body": body,
                "action_url": action_url,
                "data": json.dumps(data),
            },
        )

    def get_driver_locations(self, driver_ids: list[str]) -> list[DriverLocation]:
        rows = self._execute(
            "get_driver_locations",
            "SELECT id, lat, lng FROM get_driver_locations(driver_ids => :driver_ids)",
            {"driver_ids": list(driver_ids)},
        )
        return [DriverLocation(driver_id=str(row.id), lat=row.lat, lng=row.lng) for row in rows]
