"""Repository for the Order aggregate."""

from marketplace.domain import marketplace
from marketplace.order.order import Order


@marketplace.repository(part_of=Order)
class OrderRepository:
    """Order lookups used by the customer and store order lists."""

    def find_by_customer(self, customer_id: str, status: str | None = None) -> list[Order]:
        """Orders of a customer, newest first."""
        query = self._dao.query.filter(customer_id=customer_id)
        if status:
            query = query.filter(status=status)
        return query.order_by("-created_at").all().items

    def find_by_store(self, store_id: str, status: str | None = None) -> list[Order]:
        """Orders received by a store, newest first."""
        query = self._dao.query.filter(store_id=store_id)
        if status:
            query = query.filter(status=status)
        return query.order_by("-created_at").all().items
