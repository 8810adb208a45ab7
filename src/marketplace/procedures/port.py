"""Procedure gateway port — abstract interface to the database's stored procedures.

The marketplace depends on a handful of procedures that live in the managed
database (location ranking, stock decrement, driver auto-assignment, in-app
notifications, driver positions). Their behaviour is owned by the database;
this code only relies on their contracts. Adapters are swapped via
configuration so that domain code never talks to a driver directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class ProcedureError(Exception):
    """Raised by any adapter when a stored procedure call fails."""

    def __init__(self, procedure: str, reason: str) -> None:
        super().__init__(f"{procedure} failed: {reason}")
        self.procedure = procedure
        self.reason = reason


@dataclass(frozen=True)
class DriverLocation:
    """Last known position of a driver."""

    driver_id: str
    lat: float
    lng: float


class ProcedureGateway(ABC):
    """Abstract interface for stored procedure adapters."""

    @abstractmethod
    def get_fulfillment_location(
        self,
        store_id: str,
        product_ids: list[str],
        customer_lat: float | None,
        customer_lng: float | None,
        fulfillment_type: str,
    ) -> str | None:
        """Rank the store's locations for the given products.

        Returns:
            The id of the best location, or None when no location qualifies.
        """
        ...

    @abstractmethod
    def decrement_inventory(self, inventory_id: str, quantity: int) -> None:
        """Take `quantity` units out of an inventory record."""
        ...

    @abstractmethod
    def auto_assign_delivery(self, delivery_id: str) -> None:
        """Ask the database to match a delivery with an available driver."""
        ...

    @abstractmethod
    def create_notification(
        self,
        user_id: str,
        notification_type: str,
        title: str,
        body: str,
        action_url: str,
        data: dict,
    ) -> None:
        """Create an in-app notification for a user."""
        ...

    @abstractmethod
    def get_driver_locations(self, driver_ids: list[str]) -> list[DriverLocation]:
        """Return the last known coordinates of the given drivers."""
        ...
