"""Delivery companies and the per-store ranking of them.

A delivery company is a tenant that runs drivers. Stores rank the companies
they want to work with; the ranking is read, lowest priority number first,
when a delivery is opened for one of their orders.
"""

from datetime import UTC, datetime

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------
@marketplace.aggregate
class DeliveryCompany:
    name = String(required=True, max_length=255)
    tenant_id = Identifier()
    is_active = Boolean(default=True)
    created_at = DateTime()

    def deactivate(self) -> None:
        self.is_active = False

    def activate(self) -> None:
        self.is_active = True


@marketplace.aggregate
class StoreDeliveryPreference:
    store_id = Identifier(required=True)
    delivery_company_id = Identifier(required=True)
    priority = Integer(required=True, min_value=0)
    is_enabled = Boolean(default=True)
    created_at = DateTime()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@marketplace.command(part_of="DeliveryCompany")
class RegisterDeliveryCompany:
    name = String(required=True, max_length=255)
    tenant_id = Identifier()
    is_active = Boolean(default=True)


@marketplace.command(part_of="DeliveryCompany")
class SetDeliveryCompanyActive:
    delivery_company_id = Identifier(required=True)
    is_active = Boolean(required=True)


@marketplace.command(part_of="StoreDeliveryPreference")
class SetStoreDeliveryPreference:
    """Rank a delivery company for a store, replacing any earlier ranking."""

    store_id = Identifier(required=True)
    delivery_company_id = Identifier(required=True)
    priority = Integer(required=True, min_value=0)
    is_enabled = Boolean(default=True)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------
@marketplace.command_handler(part_of=DeliveryCompany)
class DeliveryCompanyHandler:
    @handle(RegisterDeliveryCompany)
    def register_company(self, command):
        company = DeliveryCompany(
            name=command.name,
            tenant_id=command.tenant_id,
            is_active=command.is_active if command.is_active is not None else True,
            created_at=datetime.now(UTC),
        )
        current_domain.repository_for(DeliveryCompany).add(company)
        return str(company.id)

    @handle(SetDeliveryCompanyActive)
    def set_active(self, command):
        repo = current_domain.repository_for(DeliveryCompany)
        company = repo.get(command.delivery_company_id)
        if command.is_active:
            company.activate()
        else:
            company.deactivate()
        repo.add(company)


@marketplace.command_handler(part_of=StoreDeliveryPreference)
class StoreDeliveryPreferenceHandler:
    @handle(SetStoreDeliveryPreference)
    def set_preference(self, command):
        try:
            current_domain.repository_for(DeliveryCompany).get(command.delivery_company_id)
        except ObjectNotFoundError:
            raise ValidationError({"delivery_company_id": ["Delivery company does not exist"]})

        repo = current_domain.repository_for(StoreDeliveryPreference)
        existing = repo._dao.query.filter(
            store_id=str(command.store_id),
            delivery_company_id=str(command.delivery_company_id),
        ).all()

        if existing.items:
            preference = existing.first
            preference.priority = command.priority
            preference.is_enabled = command.is_enabled if command.is_enabled is not None else True
        else:
            preference = StoreDeliveryPreference(
                store_id=command.store_id,
                delivery_company_id=command.delivery_company_id,
                priority=command.priority,
                is_enabled=command.is_enabled if command.is_enabled is not None else True,
                created_at=datetime.now(UTC),
            )
        repo.add(preference)
        return str(preference.id)
