"""
案例管理模块

高级功能，默认 locked：目录中显示 "Upgrade Required"
"""

from haalo.core.enums import UserRole
from haalo.core.modules.base import (
    MenuItem,
    ModuleCategory,
    ModuleDefinition,
    ModuleLifecycleStatus,
    ModuleMetadata,
    RouteDefinition,
)
from haalo.core.modules.lazy import LazyComponent

CASE_ROLES = [UserRole.SUPER_ADMIN.value, UserRole.COMPANY_ADMIN.value]

# 模块入口组件，所有 get_component 调用共享同一句柄
_ENTRY_COMPONENT = LazyComponent("haalo.modules.case_management.routes:overview")


case_management_module = ModuleDefinition(
    id="case_management",
    metadata=ModuleMetadata(
        name="Case Management",
        description="Employee relations cases, investigations and resolutions",
        category=ModuleCategory.HR,
        version="0.9.0",
        icon="Briefcase",
        is_premium=True,
        is_beta=True,
        status=ModuleLifecycleStatus.LOCKED,
    ),
    routes=[
        RouteDefinition(
            path="/case-management",
            component=LazyComponent("haalo.modules.case_management.routes:cases_router"),
            roles=CASE_ROLES,
        ),
    ],
    menu=[
        MenuItem(
            id="case-management",
            label="Cases",
            icon="Briefcase",
            path="/case-management/cases",
            required_roles=CASE_ROLES,
        )
    ],
    get_component=lambda: _ENTRY_COMPONENT,
)
