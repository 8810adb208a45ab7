"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that match the field names expected by the
API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()


def unique_id(prefix: str) -> str:
    """Generate ids like 'store-a1b2c3d4'."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def delivery_company_data() -> dict:
    return {"name": f"{fake.company()[:200]} Couriers", "is_active": True}


def store_location_data(is_primary: bool = True) -> dict:
    return {
        "name": f"{fake.city()[:80]} Branch",
        "address_line1": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state_abbr(),
        "zip_code": fake.zipcode()[:20],
        "latitude": float(fake.latitude()),
        "longitude": float(fake.longitude()),
        "is_primary": is_primary,
    }


def shipping_address_data() -> dict:
    return {
        "name": fake.name()[:255],
        "email": fake.free_email(),
        "phone": f"+1-{random.randint(200, 999)}-{random.randint(200, 999)}-{random.randint(1000, 9999)}",
        "street": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state_abbr(),
        "zip_code": fake.zipcode()[:20],
        "country": "US",
        "delivery_notes": random.choice([None, "Leave at the door", "Ring twice"]),
    }


def cart_line_data(store_id: str, store_name: str, location_id: str | None = None) -> dict:
    return {
        "product_id": unique_id("prod"),
        "product_name": fake.catch_phrase()[:255],
        "store_id": store_id,
        "store_name": store_name,
        "unit_price": round(random.uniform(1.0, 200.0), 2),
        "unit_tax": round(random.uniform(0.0, 10.0), 2),
        "unit_shipping_cost": round(random.uniform(0.0, 5.0), 2),
        "quantity": random.randint(1, 4),
        "location_id": location_id,
        "inventory_id": unique_id("inv"),
    }


def checkout_data(customer_id: str, lines: list[dict]) -> dict:
    return {
        "customer_id": customer_id,
        "payment_intent_id": unique_id("pi"),
        "shipping_address": shipping_address_data(),
        "items": lines,
    }
