"""
模块启动流程测试
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from haalo.core.exceptions import CircularDependencyError
from haalo.core.modules import (
    BootstrapPlan,
    ModuleCategory,
    ModuleDefinition,
    ModuleMetadata,
    ModuleRegistry,
    RouteDefinition,
    bootstrap_modules,
    plan_from_config,
    resolve_load_order,
    shutdown_modules,
)


def make_module(module_id: str, dependencies=None, initialize=None, destroy=None) -> ModuleDefinition:
    return ModuleDefinition(
        id=module_id,
        metadata=ModuleMetadata(
            name=module_id,
            description="",
            category=ModuleCategory.CORE,
            dependencies=dependencies or [],
        ),
        routes=[RouteDefinition(path=f"/{module_id}", component=lambda: None)],
        initialize=initialize,
        destroy=destroy,
    )


class TestResolveLoadOrder:
    def test_dependencies_come_first(self) -> None:
        registry = ModuleRegistry()
        registry.register(make_module("batch", ["ach"]))
        registry.register(make_module("ach"))
        registry.register(make_module("crm"))

        assert resolve_load_order(registry, ["crm", "batch", "ach"]) == ["crm", "ach", "batch"]

    def test_unrequested_dependencies_are_not_added(self) -> None:
        registry = ModuleRegistry()
        registry.register(make_module("batch", ["ach"]))
        registry.register(make_module("ach"))

        assert resolve_load_order(registry, ["batch"]) == ["batch"]

    def test_unknown_ids_kept_in_place(self) -> None:
        registry = ModuleRegistry()
        registry.register(make_module("a"))

        assert resolve_load_order(registry, ["ghost", "a", "a"]) == ["ghost", "a"]

    def test_cycle_raises(self) -> None:
        registry = ModuleRegistry()
        registry.register(make_module("a", ["b"]))
        registry.register(make_module("b", ["a"]))

        with pytest.raises(CircularDependencyError) as exc_info:
            resolve_load_order(registry, ["a", "b"])
        assert "a -> b -> a" in str(exc_info.value)


class TestBootstrapModules:
    @pytest.mark.asyncio
    async def test_registers_loads_grants_and_marks_ready(self) -> None:
        registry = ModuleRegistry()
        plan = BootstrapPlan(modules=[make_module("a"), make_module("b")], load=["a", "b"])

        result = await bootstrap_modules(registry, plan)

        assert result.loaded == ["a", "b"]
        assert result.failed == []
        assert result.granted == ["a", "b"]
        assert registry.is_ready() is True
        assert [r.path for r in registry.get_all_routes()] == ["/a", "/b"]

    @pytest.mark.asyncio
    async def test_loads_dependencies_first(self) -> None:
        calls = []
        registry = ModuleRegistry()
        plan = BootstrapPlan(
            modules=[
                make_module("batch", ["ach"], initialize=lambda cfg: calls.append("batch")),
                make_module("ach", initialize=lambda cfg: calls.append("ach")),
            ],
            load=["batch", "ach"],
        )

        result = await bootstrap_modules(registry, plan)

        assert calls == ["ach", "batch"]
        assert result.order == ["ach", "batch"]

    @pytest.mark.asyncio
    async def test_cycle_falls_back_to_declared_order(self) -> None:
        registry = ModuleRegistry()
        plan = BootstrapPlan(modules=[make_module("a", ["b"]), make_module("b", ["a"])], load=["a", "b"])

        result = await bootstrap_modules(registry, plan)

        assert result.order == ["a", "b"]
        assert result.loaded == ["a", "b"]

    @pytest.mark.asyncio
    async def test_failed_load_still_granted_but_hidden(self) -> None:
        """加载失败的模块仍获得授权，但不出现在路由聚合里"""
        registry = ModuleRegistry()
        plan = BootstrapPlan(
            modules=[make_module("ok"), make_module("bad", initialize=AsyncMock(side_effect=ValueError("x")))],
            load=["ok", "bad"],
        )

        result = await bootstrap_modules(registry, plan)

        assert result.failed == ["bad"]
        assert "bad" in result.granted
        assert registry.has_module_access("bad") is True
        assert [r.path for r in registry.get_all_routes()] == ["/ok"]
        assert registry.is_ready() is True

    @pytest.mark.asyncio
    async def test_explicit_grant_list(self) -> None:
        registry = ModuleRegistry()
        plan = BootstrapPlan(modules=[make_module("a"), make_module("b")], load=["a", "b"], grant=["b"])

        await bootstrap_modules(registry, plan)

        assert registry.has_module_access("a") is False
        assert [r.path for r in registry.get_all_routes()] == ["/b"]

    @pytest.mark.asyncio
    async def test_per_module_config_passed_to_initialize(self) -> None:
        initialize = AsyncMock()
        registry = ModuleRegistry()
        plan = BootstrapPlan(
            modules=[make_module("a", initialize=initialize)],
            load=["a"],
            configs={"a": {"flag": True}},
        )

        await bootstrap_modules(registry, plan)

        initialize.assert_awaited_once_with({"flag": True})

    @pytest.mark.asyncio
    async def test_unknown_module_in_load_list_fails(self) -> None:
        registry = ModuleRegistry()
        plan = BootstrapPlan(modules=[make_module("a")], load=["a", "ghost"])

        result = await bootstrap_modules(registry, plan)

        assert result.failed == ["ghost"]


class TestPlanFromConfig:
    def test_defaults_to_all_modules(self) -> None:
        modules = [make_module("a"), make_module("b")]
        plan = plan_from_config(modules, SimpleNamespace(module_bootstrap=None, module_access=None))

        assert plan.load == ["a", "b"]
        assert plan.grant is None

    def test_uses_configured_lists(self) -> None:
        modules = [make_module("a"), make_module("b")]
        plan = plan_from_config(modules, SimpleNamespace(module_bootstrap=["b"], module_access=["a", "b"]))

        assert plan.load == ["b"]
        assert plan.grant == ["a", "b"]


@pytest.mark.asyncio
async def test_shutdown_unloads_in_reverse_order() -> None:
    calls = []
    registry = ModuleRegistry()
    plan = BootstrapPlan(
        modules=[
            make_module("a", destroy=lambda: calls.append("a")),
            make_module("b", destroy=lambda: calls.append("b")),
        ],
        load=["a", "b"],
    )
    await bootstrap_modules(registry, plan)

    await shutdown_modules(registry)

    assert calls == ["b", "a"]
    assert registry.get_loaded_module_ids() == []
