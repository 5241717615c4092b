"""
直接存款（ACH）模块

初始化时校验目标路由号，校验失败会让模块加载失败
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


def _initialize(config: Dict[str, Any]) -> None:
    from haalo.modules.direct_deposit.service import get_ach_service

    get_ach_service().apply(config)


def _destroy() -> None:
    from haalo.modules.direct_deposit.service import get_ach_service

    get_ach_service().clear()


# 模块入口组件，所有 get_component 调用共享同一句柄
_ENTRY_COMPONENT = LazyComponent("haalo.modules.direct_deposit.routes:overview")


direct_deposit_module = ModuleDefinition(
    id="direct_deposit",
    metadata=ModuleMetadata(
        name="Direct Deposit",
        description="ACH origination settings and bank routing validation",
        category=ModuleCategory.PAYROLL,
        version="1.3.0",
        icon="Landmark",
        requires_setup=True,
    ),
    routes=[
        RouteDefinition(
            path="/payroll-iq/ach",
            component=LazyComponent("haalo.modules.direct_deposit.routes:ach_router"),
            roles=PAYROLL_ROLES,
        ),
    ],
    menu=[
        MenuItem(
            id="direct-deposit",
            label="ACH Settings",
            icon="Landmark",
            path="/payroll-iq/ach/settings",
            required_roles=PAYROLL_ROLES,
        )
    ],
    configuration={
        "company_name": "",
        "immediate_destination": "",
        "routing_number_validation": True,
        "prenote_required": True,
    },
    initialize=_initialize,
    destroy=_destroy,
    get_component=lambda: _ENTRY_COMPONENT,
)
