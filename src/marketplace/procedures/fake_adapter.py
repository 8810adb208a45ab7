"""Fake procedure adapter — in-memory stand-in for the database procedures.

Records every call, answers location rankings from a configurable table,
tracks stock levels, and can be told to fail individual procedures. Used
for development and tests.
"""

from marketplace.procedures.port import DriverLocation, ProcedureError, ProcedureGateway


class FakeProcedures(ProcedureGateway):
    """Fake procedures that succeed by default."""

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self.ranked_locations: dict[str, str] = {}
        self.stock: dict[str, int] = {}
        self.driver_positions: dict[str, tuple[float, float]] = {}
        self.failing: dict[str, str] = {}

    def configure(
        self,
        ranked_locations: dict[str, str] | None = None,
        stock: dict[str, int] | None = None,
        driver_positions: dict[str, tuple[float, float]] | None = None,
    ) -> None:
        """Configure the answers returned by the fake procedures."""
        if ranked_locations is not None:
            self.ranked_locations = dict(ranked_locations)
        if stock is not None:
            self.stock = dict(stock)
        if driver_positions is not None:
            self.driver_positions = dict(driver_positions)

    def fail(self, procedure: str, reason: str = "Procedure unavailable") -> None:
        """Make the named procedure raise ProcedureError on every call."""
        self.failing[procedure] = reason

    def calls_to(self, procedure: str) -> list[dict]:
        """Return the recorded calls to a single procedure."""
        return [call for call in self.calls if call["procedure"] == procedure]

    def reset(self) -> None:
        """Clear recorded calls and configuration."""
        self.calls.clear()
        self.ranked_locations.clear()
        self.stock.clear()
        self.driver_positions.clear()
        self.failing.clear()

    def _record(self, procedure: str, **params) -> None:
        self.calls.append({"procedure": procedure, **params})
        if procedure in self.failing:
            raise ProcedureError(procedure, self.failing[procedure])

    def get_fulfillment_location(
        self,
        store_id: str,
        product_ids: list[str],
        customer_lat: float | None,
        customer_lng: float | None,
        fulfillment_type: str,
    ) -> str | None:
        self._record(
            "get_fulfillment_location",
            store_id=store_id,
            product_ids=list(product_ids),
            customer_lat=customer_lat,
            customer_lng=customer_lng,
            fulfillment_type=fulfillment_type,
        )
        return self.ranked_locations.get(store_id)

    def decrement_inventory(self, inventory_id: str, quantity: int) -> None:
        self._record("decrement_inventory", inventory_id=inventory_id, quantity=quantity)
        # Untracked inventory is treated as unlimited
        if inventory_id not in self.stock:
            return
        if self.stock[inventory_id] < quantity:
            raise ProcedureError(
                "decrement_inventory",
                f"Insufficient stock for {inventory_id}: {self.stock[inventory_id]} < {quantity}",
            )
        self.stock[inventory_id] -= quantity

    def auto_assign_delivery(self, delivery_id: str) -> None:
        self._record("auto_assign_delivery", delivery_id=delivery_id)

    def create_notification(
        self,
        user_id: str,
        notification_type: str,
        title: str,
        body: str,
        action_url: str,
        data: dict,
    ) -> None:
        self._record(
            "create_notification",
            user_id=user_id,
            notification_type=notification_type,
            title=title,
            body=body,
            action_url=action_url,
            data=dict(data),
        )

    def get_driver_locations(self, driver_ids: list[str]) -> list[DriverLocation]:
        self._record("get_driver_locations", driver_ids=list(driver_ids))
        locations = []
        for driver_id in driver_ids:
            if driver_id in self.driver_positions:
                lat, lng = self.driver_positions[driver_id]
                locations.append(DriverLocation(driver_id=driver_id, lat=lat, lng=lng))
        return locations
