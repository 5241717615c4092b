"""模块目录构建测试"""

import pytest

from haalo.core.modules import (
    ModuleCategory,
    ModuleDefinition,
    ModuleLifecycleStatus,
    ModuleMetadata,
    ModuleRegistry,
)
from haalo.core.modules.catalog import build_catalog, describe_status


@pytest.mark.parametrize(
    "status,color,label",
    [
        (ModuleLifecycleStatus.ACTIVE, "green", "Configure"),
        (ModuleLifecycleStatus.LOCKED, "amber", "Upgrade Required"),
        (ModuleLifecycleStatus.NOT_INSTALLED, "gray", "Install"),
        ("locked", "amber", "Upgrade Required"),
    ],
)
def test_describe_status(status, color: str, label: str) -> None:
    presentation = describe_status(status)

    assert presentation.badge_color == color
    assert presentation.action_label == label


def test_status_color_override() -> None:
    presentation = describe_status(ModuleLifecycleStatus.ACTIVE, "purple")

    assert presentation.badge_color == "purple"
    assert presentation.action_label == "Configure"


def _module(module_id: str, category: ModuleCategory, status=ModuleLifecycleStatus.ACTIVE) -> ModuleDefinition:
    return ModuleDefinition(
        id=module_id,
        metadata=ModuleMetadata(name=module_id, description="", category=category, status=status),
    )


@pytest.mark.asyncio
async def test_catalog_lists_accessible_modules_regardless_of_load() -> None:
    registry = ModuleRegistry()
    registry.register(_module("crm", ModuleCategory.CRM))
    registry.register(_module("cases", ModuleCategory.HR, ModuleLifecycleStatus.LOCKED))
    registry.register(_module("hidden", ModuleCategory.HR))
    registry.set_module_access("crm", True)
    registry.set_module_access("cases", True)
    await registry.load_module("crm")

    entries = {entry.id: entry for entry in build_catalog(registry)}

    assert set(entries) == {"crm", "cases"}
    assert entries["crm"].loaded is True
    assert entries["cases"].loaded is False
    assert entries["cases"].action_label == "Upgrade Required"
    assert entries["crm"].has_component is False


def test_catalog_category_filter() -> None:
    registry = ModuleRegistry()
    registry.register(_module("crm", ModuleCategory.CRM))
    registry.register(_module("cases", ModuleCategory.HR))
    registry.set_module_access("crm", True)
    registry.set_module_access("cases", True)

    assert [e.id for e in build_catalog(registry, ModuleCategory.HR)] == ["cases"]
    assert [e.id for e in build_catalog(registry, "crm")] == ["crm"]
