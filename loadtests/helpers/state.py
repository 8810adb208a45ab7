"""Per-user state tracking for Locust load test scenarios.

Each Locust user keeps its own stores, locations and placed orders so that
follow-up requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class MarketplaceState:
    """Stores and delivery companies set up by one simulated tenant."""

    store_ids: list[str] = field(default_factory=list)
    location_ids: dict[str, str] = field(default_factory=dict)
    delivery_company_id: str | None = None


@dataclass
class CheckoutState:
    """Orders and deliveries produced by one simulated checkout."""

    customer_id: str | None = None
    order_ids: list[str] = field(default_factory=list)
    delivery_ids: list[str] = field(default_factory=list)
