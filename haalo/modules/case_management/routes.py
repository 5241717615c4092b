"""案例管理路由组件"""

from typing import Optional

from fastapi import APIRouter

from haalo.core.exceptions import NotFoundException

_SAMPLE_CASES = [
    {"id": "CASE-118", "title": "Schedule dispute", "status": "open", "priority": "medium"},
    {"id": "CASE-121", "title": "Harassment report", "status": "investigating", "priority": "high"},
    {"id": "CASE-097", "title": "Overtime pay question", "status": "resolved", "priority": "low"},
]

cases_router = APIRouter()


@cases_router.get("/cases")
async def list_cases(status: Optional[str] = None):
    return [case for case in _SAMPLE_CASES if status is None or case["status"] == status]


@cases_router.get("/cases/{case_id}")
async def get_case(case_id: str):
    for case in _SAMPLE_CASES:
        if case["id"] == case_id:
            return case
    raise NotFoundException(f"案例 {case_id} 不存在")


async def overview():
    open_cases = [case for case in _SAMPLE_CASES if case["status"] != "resolved"]
    return {"open_cases": len(open_cases), "total_cases": len(_SAMPLE_CASES)}
