"""
模块目录

把有访问权限的模块整理成前端目录卡片所需的数据
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from haalo.core.modules.base import ModuleCategory, ModuleDefinition, ModuleLifecycleStatus
from haalo.core.modules.registry import ModuleRegistry


@dataclass(frozen=True)
class StatusPresentation:
    badge_color: str
    action_label: str


_STATUS_PRESENTATION: Dict[ModuleLifecycleStatus, StatusPresentation] = {
    ModuleLifecycleStatus.ACTIVE: StatusPresentation("green", "Configure"),
    ModuleLifecycleStatus.LOCKED: StatusPresentation("amber", "Upgrade Required"),
    ModuleLifecycleStatus.NOT_INSTALLED: StatusPresentation("gray", "Install"),
}


def describe_status(
    status: ModuleLifecycleStatus | str, status_color: Optional[str] = None
) -> StatusPresentation:
    """模块状态 -> 徽标颜色和操作按钮文案；status_color 覆盖默认颜色"""
    presentation = _STATUS_PRESENTATION[ModuleLifecycleStatus(status)]
    if status_color:
        return StatusPresentation(status_color, presentation.action_label)
    return presentation


@dataclass
class CatalogEntry:
    id: str
    name: str
    description: str
    version: str
    icon: Optional[str]
    category: str
    status: str
    badge_color: str
    action_label: str
    is_premium: bool
    is_beta: bool
    is_coming_soon: bool
    requires_setup: bool
    loaded: bool
    has_component: bool

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


def build_entry(registry: ModuleRegistry, module: ModuleDefinition) -> CatalogEntry:
    meta = module.metadata
    presentation = describe_status(meta.status, meta.status_color)
    return CatalogEntry(
        id=module.id,
        name=meta.name,
        description=meta.description,
        version=meta.version,
        icon=meta.icon,
        category=meta.category.value,
        status=meta.status.value,
        badge_color=presentation.badge_color,
        action_label=presentation.action_label,
        is_premium=meta.is_premium,
        is_beta=meta.is_beta,
        is_coming_soon=meta.is_coming_soon,
        requires_setup=meta.requires_setup,
        loaded=registry.is_module_loaded(module.id),
        has_component=module.get_component is not None,
    )


def build_catalog(
    registry: ModuleRegistry, category: ModuleCategory | str | None = None
) -> List[CatalogEntry]:
    """目录只展示有访问权限的模块（不要求已加载）"""
    modules = registry.get_accessible_modules()
    if category is not None:
        value = category.value if isinstance(category, ModuleCategory) else category
        modules = [m for m in modules if m.metadata.category.value == value]
    return [build_entry(registry, m) for m in modules]
