"""
CRM 数据访问

真实数据来自托管后端；这里保留接口形状并返回示例数据
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

DEFAULT_STAGES = ["lead", "qualified", "proposal", "won", "lost"]


@dataclass
class Deal:
    id: str
    company: str
    stage: str
    value: float


@dataclass
class Contact:
    id: str
    name: str
    email: str
    company: str


_SAMPLE_DEALS = [
    Deal(id="D-1001", company="Acme Staffing", stage="lead", value=12000.0),
    Deal(id="D-1002", company="Northwind Clinics", stage="proposal", value=48500.0),
    Deal(id="D-1003", company="Blue Harbor Logistics", stage="won", value=27250.0),
]

_SAMPLE_CONTACTS = [
    Contact(id="C-01", name="Dana Ruiz", email="dana@acmestaffing.example", company="Acme Staffing"),
    Contact(id="C-02", name="Lee Okafor", email="lee@northwind.example", company="Northwind Clinics"),
]


class CrmService:
    def __init__(self) -> None:
        self.stages: List[str] = list(DEFAULT_STAGES)

    def configure(self, stages: Optional[List[str]]) -> None:
        if stages is not None:
            if not stages:
                raise ValueError("pipeline_stages must not be empty")
            self.stages = list(stages)

    def reset(self) -> None:
        self.stages = list(DEFAULT_STAGES)

    def list_deals(self, stage: Optional[str] = None) -> List[Deal]:
        if stage is None:
            return list(_SAMPLE_DEALS)
        return [deal for deal in _SAMPLE_DEALS if deal.stage == stage]

    def get_deal(self, deal_id: str) -> Optional[Deal]:
        return next((deal for deal in _SAMPLE_DEALS if deal.id == deal_id), None)

    def list_contacts(self) -> List[Contact]:
        return list(_SAMPLE_CONTACTS)

    def pipeline_summary(self) -> dict:
        return {
            stage: sum(deal.value for deal in _SAMPLE_DEALS if deal.stage == stage)
            for stage in self.stages
        }


_crm_service: CrmService | None = None


def get_crm_service() -> CrmService:
    global _crm_service
    if _crm_service is None:
        _crm_service = CrmService()
    return _crm_service
