"""工资批次路由组件"""

from typing import Optional

from fastapi import APIRouter

from haalo.core.exceptions import NotFoundException
from haalo.modules.payroll_batch.service import get_batch_service

batches_router = APIRouter()


@batches_router.get("")
async def list_batches(status: Optional[str] = None):
    return [batch.to_dict() for batch in get_batch_service().list_batches(status)]


@batches_router.get("/{batch_id}")
async def get_batch(batch_id: str):
    batch = get_batch_service().get_batch(batch_id)
    if batch is None:
        raise NotFoundException(f"批次 {batch_id} 不存在")
    return batch.to_dict()


async def payroll_home():
    """PayrollIQ 首页：最近的批次"""
    latest = get_batch_service().list_batches()[:3]
    return {"module": "payroll_batch", "recent_batches": [batch.to_dict() for batch in latest]}
