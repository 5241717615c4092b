"""直接存款路由组件"""

from fastapi import APIRouter
from pydantic import BaseModel

from haalo.core.exceptions import ModuleNotReadyException
from haalo.modules.direct_deposit.service import get_ach_service
from haalo.modules.direct_deposit.validation import is_valid_routing_number

ach_router = APIRouter()


class RoutingCheckRequest(BaseModel):
    routing_number: str


@ach_router.get("/settings")
async def get_ach_settings():
    service = get_ach_service()
    if not service.configured:
        raise ModuleNotReadyException("ACH 设置尚未初始化")
    return service.settings.to_public_dict()


@ach_router.post("/validate-routing")
async def validate_routing(request: RoutingCheckRequest):
    """校验银行路由号（ABA 校验和）"""
    return {"valid": is_valid_routing_number(request.routing_number)}


async def overview():
    service = get_ach_service()
    return {
        "configured": service.configured,
        "settings": service.settings.to_public_dict() if service.configured else None,
    }
