"""
Endpoints do Painel Administrativo e do formulário público de leads.

Todas as rotas /admin exigem sessão de administrador.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from portal.domain.models import Principal
from portal.presentation.routes.memorials import summary_out
from portal.presentation.schemas.commerce_schemas import (
    AdminStatsOut,
    FamilyUserOut,
    FuneralHomeOut,
    LeadCreate,
    LeadOut,
    LeadStatusLiteral,
    LeadUpdate,
    OrderCreate,
    OrderDetailOut,
    OrderOut,
    OrderUpdate,
    PriorityLiteral,
    ProductionStatusLiteral,
)
from portal.presentation.schemas.memorial_schemas import MemorialSummaryOut
from portal.server.dependencies import get_admin_service, require_admin
from portal.services.admin_service import AdminService, lead_to_dict, order_to_dict
from portal.services.memorial_service import clear_memorial_cache

logger = logging.getLogger("routes.admin")

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=AdminStatsOut)
async def get_stats(service: AdminService = Depends(get_admin_service)):
    return await service.stats()


# ─── Pedidos ───────────────────────────────────────────────────────────────


@router.get("/orders", response_model=list[OrderOut])
async def list_orders(
    status_filter: Optional[ProductionStatusLiteral] = Query(default=None, alias="status"),
    priority: Optional[PriorityLiteral] = Query(default=None),
    funeral_home_id: Optional[int] = Query(default=None),
    service: AdminService = Depends(get_admin_service),
):
    orders = await service.list_orders(status_filter, priority, funeral_home_id)
    return [order_to_dict(order) for order in orders]


@router.post("/orders", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Abre pedido de produção manualmente para um memorial."""
    return order_to_dict(await service.create_order(payload, principal))


@router.get("/orders/{order_id}", response_model=OrderDetailOut)
async def get_order(order_id: int, service: AdminService = Depends(get_admin_service)):
    order, history = await service.get_order(order_id)
    return {**order_to_dict(order), "history": [entry.model_dump() for entry in history]}


@router.patch("/orders/{order_id}", response_model=OrderOut)
async def update_order(
    order_id: int,
    payload: OrderUpdate,
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return order_to_dict(await service.update_order(order_id, payload, principal))


# ─── Leads ─────────────────────────────────────────────────────────────────


@router.get("/leads", response_model=list[LeadOut])
async def list_leads(
    status_filter: Optional[LeadStatusLiteral] = Query(default=None, alias="status"),
    service: AdminService = Depends(get_admin_service),
):
    return [lead_to_dict(lead) for lead in await service.list_leads(status_filter)]


@router.patch("/leads/{lead_id}", response_model=LeadOut)
async def update_lead(
    lead_id: int,
    payload: LeadUpdate,
    service: AdminService = Depends(get_admin_service),
):
    return lead_to_dict(await service.update_lead(lead_id, payload))


# ─── Listagens ─────────────────────────────────────────────────────────────


@router.get("/funeral-homes", response_model=list[FuneralHomeOut])
async def list_funeral_homes(service: AdminService = Depends(get_admin_service)):
    return await service.list_funeral_homes()


@router.get("/family-users", response_model=list[FamilyUserOut])
async def list_family_users(service: AdminService = Depends(get_admin_service)):
    return await service.list_family_users()


@router.get("/memorials", response_model=list[MemorialSummaryOut])
async def list_all_memorials(service: AdminService = Depends(get_admin_service)):
    return [summary_out(*row) for row in await service.list_memorials()]


@router.post("/cache/clear")
async def clear_cache():
    removed = await clear_memorial_cache()
    logger.info("Cache de memoriais limpo manualmente (%s entradas)", removed)
    return {"success": True, "cleared": removed}


# ─── Leads (público) ───────────────────────────────────────────────────────

leads_router = APIRouter(prefix="/leads", tags=["Leads"])


@leads_router.post("", response_model=LeadOut, status_code=status.HTTP_201_CREATED)
async def create_lead(payload: LeadCreate, service: AdminService = Depends(get_admin_service)):
    """Formulário de contato do site."""
    return lead_to_dict(await service.create_lead(payload))
