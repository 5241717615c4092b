"""ConnectIQ 路由组件"""

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter

from haalo.core.exceptions import NotFoundException
from haalo.modules.connect_iq.service import get_crm_service


async def dashboard():
    """CRM 首页概览"""
    service = get_crm_service()
    return {
        "module": "connect_iq",
        "stages": service.stages,
        "pipeline": service.pipeline_summary(),
    }


async def overview():
    """目录详情视图"""
    service = get_crm_service()
    return {
        "open_deals": len([d for d in service.list_deals() if d.stage not in ("won", "lost")]),
        "contacts": len(service.list_contacts()),
    }


deals_router = APIRouter()


@deals_router.get("")
async def list_deals(stage: Optional[str] = None):
    return [asdict(deal) for deal in get_crm_service().list_deals(stage)]


@deals_router.get("/{deal_id}")
async def get_deal(deal_id: str):
    deal = get_crm_service().get_deal(deal_id)
    if deal is None:
        raise NotFoundException(f"商机 {deal_id} 不存在")
    return asdict(deal)


contacts_router = APIRouter()


@contacts_router.get("")
async def list_contacts():
    return [asdict(contact) for contact in get_crm_service().list_contacts()]
