import pytest
from marketplace.procedures import reset_procedures, set_procedures
from marketplace.procedures.fake_adapter import FakeProcedures
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def procedures():
    """A fresh in-memory procedure gateway for every test."""
    fake = FakeProcedures()
    set_procedures(fake)
    yield fake
    reset_procedures()
