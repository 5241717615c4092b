"""
模块注册审计

供超级管理员检查各模块的路由完整性和访问控制配置
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from haalo.core.modules.base import ModuleDefinition
from haalo.core.modules.registry import ModuleRegistry

FUNCTIONAL_AREAS = {
    "payroll": "Payroll Engine",
    "time": "Time & Attendance",
    "tax": "Tax Management",
    "compliance": "Compliance & Legal",
    "benefits": "Benefits & HR",
    "core": "Core System",
    "reporting": "Analytics & Reporting",
    "finance": "Finance & Billing",
}

# 按顺序匹配，先命中者优先
_AREA_KEYWORDS = [
    ("payroll", ("payroll",)),
    ("time", ("time", "attendance")),
    ("tax", ("tax", "yearend")),
    ("compliance", ("compliance", "aca", "wage")),
    ("benefits", ("benefits", "sync")),
    ("reporting", ("analytics", "report")),
    ("finance", ("billing", "finance")),
]


def determine_functional_area(module_name: str) -> str:
    name = module_name.lower()
    for area, keywords in _AREA_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return area
    return "core"


def validate_access_control(module: ModuleDefinition) -> bool:
    """每条路由都声明了角色且没有显式关闭保护"""
    return all(route.roles and route.protected for route in module.routes)


def find_route_issues(module: ModuleDefinition) -> List[str]:
    issues: List[str] = []
    seen: set[str] = set()
    for index, route in enumerate(module.routes):
        if not route.path:
            issues.append(f"route #{index} has an empty path")
            continue
        if "undefined" in route.path:
            issues.append(f"route {route.path} contains 'undefined'")
        if route.component is None:
            issues.append(f"route {route.path} has no component")
        if route.path in seen:
            issues.append(f"route {route.path} is declared more than once")
        seen.add(route.path)
    return issues


@dataclass
class ModuleAuditEntry:
    id: str
    name: str
    functional_area: str
    primary_routes: List[str]
    access_control_validated: bool
    route_issues: List[str] = field(default_factory=list)
    loaded: bool = False
    access: bool = False
    missing_dependencies: List[str] = field(default_factory=list)

    @property
    def has_route_issues(self) -> bool:
        return bool(self.route_issues)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.__dict__)
        data["functional_area_label"] = FUNCTIONAL_AREAS[self.functional_area]
        data["has_route_issues"] = self.has_route_issues
        return data


def audit_modules(registry: ModuleRegistry) -> List[ModuleAuditEntry]:
    entries = []
    for module in registry.get_all_modules():
        _, missing = registry.check_dependencies(module.id)
        entries.append(
            ModuleAuditEntry(
                id=module.id,
                name=module.metadata.name,
                functional_area=determine_functional_area(module.metadata.name),
                primary_routes=[route.path for route in module.routes],
                access_control_validated=validate_access_control(module),
                route_issues=find_route_issues(module),
                loaded=registry.is_module_loaded(module.id),
                access=registry.has_module_access(module.id),
                missing_dependencies=missing,
            )
        )
    return entries
