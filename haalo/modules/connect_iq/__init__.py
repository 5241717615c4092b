"""
ConnectIQ CRM 模块

提供商机、联系人管理入口；数据由外部后端提供，这里只声明路由和菜单
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

CRM_ROLES = [UserRole.SUPER_ADMIN.value, UserRole.COMPANY_ADMIN.value]


async def _initialize(config: Dict[str, Any]) -> None:
    """应用管道阶段配置（延迟导入服务）"""
    from haalo.modules.connect_iq.service import get_crm_service

    get_crm_service().configure(config.get("pipeline_stages"))


async def _destroy() -> None:
    from haalo.modules.connect_iq.service import get_crm_service

    get_crm_service().reset()


# 模块入口组件，所有 get_component 调用共享同一句柄
_ENTRY_COMPONENT = LazyComponent("haalo.modules.connect_iq.routes:overview")


connect_iq_module = ModuleDefinition(
    id="connect_iq",
    metadata=ModuleMetadata(
        name="ConnectIQ CRM",
        description="Pipeline, deal and contact management for client acquisition",
        category=ModuleCategory.CRM,
        version="2.1.0",
        icon="Users",
    ),
    routes=[
        RouteDefinition(
            path="/admin/connectiq",
            component=LazyComponent("haalo.modules.connect_iq.routes:dashboard"),
            exact=True,
            roles=CRM_ROLES,
        ),
        RouteDefinition(
            path="/admin/connectiq/deals",
            component=LazyComponent("haalo.modules.connect_iq.routes:deals_router"),
            roles=CRM_ROLES,
        ),
        RouteDefinition(
            path="/admin/connectiq/contacts",
            component=LazyComponent("haalo.modules.connect_iq.routes:contacts_router"),
            roles=CRM_ROLES,
        ),
    ],
    menu=[
        MenuItem(
            id="connectiq",
            label="ConnectIQ",
            icon="Users",
            required_roles=CRM_ROLES,
            children=[
                MenuItem(id="connectiq-dashboard", label="Dashboard", path="/admin/connectiq"),
                MenuItem(id="connectiq-deals", label="Deals", path="/admin/connectiq/deals"),
                MenuItem(
                    id="connectiq-contacts",
                    label="Contacts",
                    path="/admin/connectiq/contacts",
                    permissions=["crm.contacts.read"],
                ),
            ],
        )
    ],
    configuration={"pipeline_stages": ["lead", "qualified", "proposal", "won", "lost"]},
    initialize=_initialize,
    destroy=_destroy,
    get_component=lambda: _ENTRY_COMPONENT,
)
