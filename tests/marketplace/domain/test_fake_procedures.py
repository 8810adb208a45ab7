"""Tests for the in-memory procedure adapter."""

import pytest
from marketplace.procedures import ProcedureError
from marketplace.procedures.fake_adapter import FakeProcedures


@pytest.fixture()
def fake():
    return FakeProcedures()


class TestRecording:
    def test_records_calls(self, fake):
        fake.auto_assign_delivery("del-1")
        assert fake.calls_to("auto_assign_delivery") == [{"procedure": "auto_assign_delivery", "delivery_id": "del-1"}]

    def test_reset_clears_everything(self, fake):
        fake.configure(stock={"inv-1": 3})
        fake.fail("auto_assign_delivery")
        with pytest.raises(ProcedureError):
            fake.auto_assign_delivery("del-1")
        fake.reset()
        assert fake.calls == []
        assert fake.stock == {}
        fake.auto_assign_delivery("del-1")


class TestFailures:
    def test_failing_procedure_raises(self, fake):
        fake.fail("create_notification", "Notifications offline")
        with pytest.raises(ProcedureError) as exc_info:
            fake.create_notification("u1", "order", "t", "b", "/x", {})
        assert exc_info.value.procedure == "create_notification"
        assert exc_info.value.reason == "Notifications offline"

    def test_failure_is_per_procedure(self, fake):
        fake.fail("create_notification")
        fake.auto_assign_delivery("del-1")
        assert len(fake.calls_to("auto_assign_delivery")) == 1


class TestFulfillmentLocation:
    def test_returns_configured_location(self, fake):
        fake.configure(ranked_locations={"S1": "L9"})
        assert fake.get_fulfillment_location("S1", ["p1"], 1.0, 2.0, "delivery") == "L9"

    def test_unranked_store(self, fake):
        assert fake.get_fulfillment_location("S1", ["p1"], None, None, "delivery") is None


class TestInventory:
    def test_decrements_tracked_stock(self, fake):
        fake.configure(stock={"inv-1": 5})
        fake.decrement_inventory("inv-1", 2)
        assert fake.stock["inv-1"] == 3

    def test_insufficient_stock(self, fake):
        fake.configure(stock={"inv-1": 1})
        with pytest.raises(ProcedureError):
            fake.decrement_inventory("inv-1", 2)
        assert fake.stock["inv-1"] == 1

    def test_untracked_inventory_is_unlimited(self, fake):
        fake.decrement_inventory("inv-x", 100)
        assert "inv-x" not in fake.stock


class TestDriverLocations:
    def test_known_drivers_only(self, fake):
        fake.configure(driver_positions={"d1": (40.0, -73.0)})
        locations = fake.get_driver_locations(["d1", "d2"])
        assert len(locations) == 1
        assert locations[0].driver_id == "d1"
        assert (locations[0].lat, locations[0].lng) == (40.0, -73.0)
