"""
Repositories comerciais: pagamentos, pedidos de produção e leads.
"""

from typing import Optional

from sqlalchemy import func, select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from portal.config.constants import PaymentStatus
from portal.domain.commerce_models import Lead, Order, OrderHistory, Payment
from portal.utils.dates import utcnow


class PaymentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def get_by_id(self, payment_id: int) -> Optional[Payment]:
        return await self.session.get(Payment, payment_id)

    async def get_by_provider_id(self, provider_payment_id: str) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.provider_payment_id == provider_payment_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_for_account(self, account_type: str, account_id: int) -> list[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.account_type == account_type)
            .where(Payment.account_id == account_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def save(self, payment: Payment) -> Payment:
        payment.updated_at = utcnow()
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def total_succeeded_amount(self) -> int:
        stmt = sa_select(func.coalesce(func.sum(Payment.amount), 0)).where(
            Payment.status == PaymentStatus.SUCCEEDED.value
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())


class OrderRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, order: Order) -> Order:
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return order

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        return await self.session.get(Order, order_id)

    async def get_by_payment_id(self, payment_id: int) -> Optional[Order]:
        stmt = select(Order).where(Order.payment_id == payment_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_orders(
        self,
        production_status: Optional[str] = None,
        priority: Optional[str] = None,
        funeral_home_id: Optional[int] = None,
    ) -> list[Order]:
        stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
        if production_status:
            stmt = stmt.where(Order.production_status == production_status)
        if priority:
            stmt = stmt.where(Order.priority == priority)
        if funeral_home_id is not None:
            stmt = stmt.where(Order.funeral_home_id == funeral_home_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def save(self, order: Order) -> Order:
        order.updated_at = utcnow()
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return order

    async def add_history(self, entry: OrderHistory) -> OrderHistory:
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def list_history(self, order_id: int) -> list[OrderHistory]:
        stmt = (
            select(OrderHistory)
            .where(OrderHistory.order_id == order_id)
            .order_by(OrderHistory.created_at, OrderHistory.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_status(self) -> dict[str, int]:
        stmt = sa_select(Order.production_status, func.count(Order.id)).group_by(
            Order.production_status
        )
        result = await self.session.execute(stmt)
        return {status: int(total) for status, total in result.all()}


class LeadRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, lead: Lead) -> Lead:
        self.session.add(lead)
        await self.session.flush()
        await self.session.refresh(lead)
        return lead

    async def get_by_id(self, lead_id: int) -> Optional[Lead]:
        return await self.session.get(Lead, lead_id)

    async def list_leads(self, status: Optional[str] = None) -> list[Lead]:
        stmt = select(Lead).order_by(Lead.created_at.desc(), Lead.id.desc())
        if status:
            stmt = stmt.where(Lead.status == status)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def save(self, lead: Lead) -> Lead:
        lead.updated_at = utcnow()
        self.session.add(lead)
        await self.session.flush()
        await self.session.refresh(lead)
        return lead

    async def count_by_status(self) -> dict[str, int]:
        stmt = sa_select(Lead.status, func.count(Lead.id)).group_by(Lead.status)
        result = await self.session.execute(stmt)
        return {status: int(total) for status, total in result.all()}
