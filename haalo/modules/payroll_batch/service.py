"""
工资批次数据

批次的计算和提交由后端完成，这里只提供列表和详情的示例数据
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass
class PayrollBatch:
    id: str
    pay_date: date
    status: str  # draft / processing / completed
    employee_count: int
    gross_total: float
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pay_date": self.pay_date.isoformat(),
            "status": self.status,
            "employee_count": self.employee_count,
            "gross_total": self.gross_total,
            "notes": list(self.notes),
        }


_SAMPLE_BATCHES = [
    PayrollBatch("PB-2024-001", date(2024, 1, 15), "completed", 42, 96800.50),
    PayrollBatch("PB-2024-002", date(2024, 1, 31), "completed", 43, 98120.00),
    PayrollBatch("PB-2024-003", date(2024, 2, 15), "processing", 44, 99410.25, ["2 pending prenotes"]),
    PayrollBatch("PB-2024-004", date(2024, 2, 29), "draft", 44, 0.0),
]


class BatchService:
    def __init__(self) -> None:
        self.max_batch_size = 500

    def configure(self, max_batch_size: Optional[int]) -> None:
        if max_batch_size is None:
            return
        if not isinstance(max_batch_size, int) or max_batch_size <= 0:
            raise ValueError(f"max_batch_size must be a positive integer, got {max_batch_size!r}")
        self.max_batch_size = max_batch_size

    def list_batches(self, status: Optional[str] = None) -> List[PayrollBatch]:
        batches = [b for b in _SAMPLE_BATCHES if status is None or b.status == status]
        return sorted(batches, key=lambda b: b.pay_date, reverse=True)

    def get_batch(self, batch_id: str) -> Optional[PayrollBatch]:
        return next((b for b in _SAMPLE_BATCHES if b.id == batch_id), None)


_batch_service: BatchService | None = None


def get_batch_service() -> BatchService:
    global _batch_service
    if _batch_service is None:
        _batch_service = BatchService()
    return _batch_service
