"""
Service do Painel Administrativo: estatísticas, pedidos de produção,
leads comerciais e listagens gerais.
"""

import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from portal.config.constants import LeadStatus, MemorialStatus, ProductionStatus, StatusLabels
from portal.config.exceptions import NotFoundError
from portal.domain.commerce_models import Lead, Order, OrderHistory
from portal.domain.models import Principal
from portal.infrastructure.repositories.account_repository import (
    FamilyUserRepository,
    FuneralHomeRepository,
)
from portal.infrastructure.repositories.commerce_repository import (
    LeadRepository,
    OrderRepository,
    PaymentRepository,
)
from portal.infrastructure.repositories.content_repository import DedicationRepository
from portal.infrastructure.repositories.memorial_repository import MemorialRepository
from portal.presentation.schemas.commerce_schemas import (
    LeadCreate,
    LeadUpdate,
    OrderCreate,
    OrderUpdate,
)
from portal.services.memorial_service import MEMORIAL_NOT_FOUND
from portal.utils.dates import utcnow
from portal.utils.formatting import format_price

logger = logging.getLogger("service.admin")


def order_to_dict(order: Order) -> dict[str, Any]:
    data = order.model_dump()
    data["production_status_label"] = StatusLabels.PRODUCTION.get(
        order.production_status, order.production_status
    )
    data["priority_label"] = StatusLabels.PRIORITY.get(order.priority, order.priority)
    return data


def lead_to_dict(lead: Lead) -> dict[str, Any]:
    data = lead.model_dump()
    data["status_label"] = StatusLabels.LEAD.get(lead.status, lead.status)
    return data


class AdminService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.memorials = MemorialRepository(session)
        self.funeral_homes = FuneralHomeRepository(session)
        self.family_users = FamilyUserRepository(session)
        self.dedications = DedicationRepository(session)
        self.orders = OrderRepository(session)
        self.leads = LeadRepository(session)
        self.payments = PaymentRepository(session)

    async def stats(self) -> dict[str, Any]:
        memorials = await self.memorials.count_by_status()
        orders = await self.orders.count_by_status()
        leads = await self.leads.count_by_status()
        revenue = await self.payments.total_succeeded_amount()

        return {
            "total_memorials": sum(memorials.values()),
            "active_memorials": memorials.get(MemorialStatus.ACTIVE.value, 0),
            "pending_memorials": memorials.get(MemorialStatus.PENDING_DATA.value, 0),
            "inactive_memorials": memorials.get(MemorialStatus.INACTIVE.value, 0),
            "total_funeral_homes": await self.funeral_homes.count(),
            "total_family_users": await self.family_users.count(),
            "total_dedications": await self.dedications.count(),
            "total_leads": sum(leads.values()),
            "pending_leads": leads.get(LeadStatus.PENDING.value, 0),
            "total_orders": sum(orders.values()),
            "orders_by_status": {status.value: orders.get(status.value, 0) for status in ProductionStatus},
            "revenue_cents": revenue,
            "revenue_formatted": format_price(revenue),
        }

    # ─── Pedidos ───────────────────────────────────────────────────────────

    async def list_orders(
        self,
        production_status: Optional[str] = None,
        priority: Optional[str] = None,
        funeral_home_id: Optional[int] = None,
    ) -> list[Order]:
        return await self.orders.list_orders(
            production_status=production_status,
            priority=priority,
            funeral_home_id=funeral_home_id,
        )

    async def _get_order(self, order_id: int) -> Order:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Pedido", order_id, message="Pedido não encontrado")
        return order

    async def get_order(self, order_id: int) -> tuple[Order, list[OrderHistory]]:
        order = await self._get_order(order_id)
        return order, await self.orders.list_history(order.id)

    async def create_order(self, data: OrderCreate, principal: Principal) -> Order:
        memorial = await self.memorials.get_by_id(data.memorial_id)
        if memorial is None:
            raise NotFoundError("Memorial", data.memorial_id, message=MEMORIAL_NOT_FOUND)

        order = await self.orders.create(
            Order(
                memorial_id=memorial.id,
                funeral_home_id=memorial.funeral_home_id,
                family_user_id=memorial.family_user_id,
                priority=data.priority,
                notes=data.notes,
                estimated_delivery=data.estimated_delivery,
                assigned_to=data.assigned_to,
            )
        )
        await self.orders.add_history(
            OrderHistory(
                order_id=order.id,
                previous_status=None,
                new_status=order.production_status,
                changed_by=principal.email,
                notes="Pedido criado manualmente",
            )
        )
        await self.session.commit()
        logger.info("Pedido criado: id=%s memorial=%s by=%s", order.id, memorial.id, principal.email)
        return order

    async def update_order(self, order_id: int, data: OrderUpdate, principal: Principal) -> Order:
        """
        Atualiza o pedido. Mudança de status gera linha no histórico;
        status `delivered` registra a data de entrega.
        """
        order = await self._get_order(order_id)
        changes = data.model_dump(exclude_unset=True, exclude={"history_note"})
        previous_status = order.production_status
        new_status = changes.pop("production_status", None) or previous_status

        for field_name, value in changes.items():
            if field_name == "priority" and value is None:
                continue
            setattr(order, field_name, value)

        if new_status != previous_status:
            order.production_status = new_status
            if new_status == ProductionStatus.DELIVERED.value:
                order.delivered_at = utcnow()
            await self.orders.add_history(
                OrderHistory(
                    order_id=order.id,
                    previous_status=previous_status,
                    new_status=new_status,
                    changed_by=principal.email,
                    notes=data.history_note,
                )
            )
            logger.info(
                "Pedido %s: %s -> %s by=%s", order.id, previous_status, new_status, principal.email
            )

        order = await self.orders.save(order)
        await self.session.commit()
        return order

    # ─── Leads ─────────────────────────────────────────────────────────────

    async def create_lead(self, data: LeadCreate) -> Lead:
        lead = await self.leads.create(
            Lead(
                name=data.name,
                email=data.email,
                phone=data.phone,
                accept_emails=data.accept_emails,
                notes=data.notes,
            )
        )
        await self.session.commit()
        logger.info("Lead registrado: id=%s", lead.id)
        return lead

    async def list_leads(self, status: Optional[str] = None) -> list[Lead]:
        return await self.leads.list_leads(status=status)

    async def update_lead(self, lead_id: int, data: LeadUpdate) -> Lead:
        lead = await self.leads.get_by_id(lead_id)
        if lead is None:
            raise NotFoundError("Lead", lead_id, message="Lead não encontrado")

        changes = data.model_dump(exclude_unset=True)
        if changes.get("status"):
            lead.status = changes["status"]
        if "notes" in changes:
            lead.notes = changes["notes"]
        lead = await self.leads.save(lead)
        await self.session.commit()
        logger.info("Lead atualizado: id=%s status=%s", lead.id, lead.status)
        return lead

    # ─── Listagens ─────────────────────────────────────────────────────────

    async def list_funeral_homes(self):
        return await self.funeral_homes.list_all()

    async def list_family_users(self) -> list[dict[str, Any]]:
        return [
            {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "phone": user.phone,
                "is_active": user.is_active,
                "invitation_pending": user.invitation_token is not None,
                "created_at": user.created_at,
            }
            for user in await self.family_users.list_all()
        ]

    async def list_memorials(self):
        return await self.memorials.list_with_counts()
