"""
PayrollIQ 工资批次模块

依赖 direct_deposit：批次发放走 ACH 设置
"""

from __future__ import annotations

from typing import Any, Dict

from haalo.core.enums import UserRole
from haalo.core.modules.base import (
    MenuItem,
    ModuleCategory,
    ModuleDefinition,
    ModuleMetadata,
    RouteDefinition,
)
from haalo.core.modules.lazy import LazyComponent

PAYROLL_ROLES = [UserRole.SUPER_ADMIN.value, UserRole.COMPANY_ADMIN.value, UserRole.CLIENT_ADMIN.value]


async def _initialize(config: Dict[str, Any]) -> None:
    from haalo.modules.payroll_batch.service import get_batch_service

    get_batch_service().configure(config.get("max_batch_size"))


# 模块入口组件，所有 get_component 调用共享同一句柄
_ENTRY_COMPONENT = LazyComponent("haalo.modules.payroll_batch.routes:payroll_home")


payroll_batch_module = ModuleDefinition(
    id="payroll_batch",
    metadata=ModuleMetadata(
        name="PayrollIQ Batches",
        description="Payroll batch review and history",
        category=ModuleCategory.PAYROLL,
        version="3.0.2",
        icon="DollarSign",
        dependencies=["direct_deposit"],
    ),
    routes=[
        RouteDefinition(
            path="/payroll-iq",
            component=LazyComponent("haalo.modules.payroll_batch.routes:payroll_home"),
            exact=True,
            roles=PAYROLL_ROLES,
        ),
        RouteDefinition(
            path="/payroll-iq/batches",
            component=LazyComponent("haalo.modules.payroll_batch.routes:batches_router"),
            roles=PAYROLL_ROLES,
        ),
    ],
    menu=[
        MenuItem(
            id="payroll-iq",
            label="PayrollIQ",
            icon="DollarSign",
            required_roles=PAYROLL_ROLES,
            children=[
                MenuItem(id="payroll-home", label="Overview", path="/payroll-iq"),
                MenuItem(id="payroll-batches", label="Batches", path="/payroll-iq/batches"),
            ],
        )
    ],
    configuration={"max_batch_size": 500},
    initialize=_initialize,
    get_component=lambda: _ENTRY_COMPONENT,
)
