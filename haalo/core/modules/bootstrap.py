"""
模块启动流程

按显式列表注册模块、按依赖顺序加载、授予访问权限，最后标记注册中心就绪。
注册中心本身不做模块自动发现，所有模块都必须出现在启动计划里。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from haalo.core.exceptions import CircularDependencyError
from haalo.core.logger import logger
from haalo.core.modules.base import ModuleDefinition
from haalo.core.modules.registration import register_module
from haalo.core.modules.registry import ModuleRegistry


@dataclass
class BootstrapPlan:
    """启动计划"""

    modules: Sequence[ModuleDefinition]  # 按顺序注册的模块定义
    load: Sequence[str]  # 需要加载的模块 ID
    grant: Optional[Sequence[str]] = None  # 授予访问权限的模块 ID，None 表示同 load
    configs: Dict[str, Dict[str, Any]] = field(default_factory=dict)  # 每个模块的初始化配置


@dataclass
class BootstrapResult:
    order: List[str] = field(default_factory=list)
    loaded: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    granted: List[str] = field(default_factory=list)


def resolve_load_order(registry: ModuleRegistry, module_ids: Sequence[str]) -> List[str]:
    """
    计算加载顺序：被依赖的模块排在前面

    只对请求列表内的模块排序，未请求的依赖不会被自动加入；
    同一层级保持请求列表中的原始顺序。

    Raises:
        CircularDependencyError: 依赖存在环
    """
    requested = list(dict.fromkeys(module_ids))
    requested_set = set(requested)
    order: List[str] = []
    visited: set[str] = set()
    stack: List[str] = []

    def visit(module_id: str) -> None:
        if module_id in visited:
            return
        if module_id in stack:
            cycle = " -> ".join(stack[stack.index(module_id):] + [module_id])
            raise CircularDependencyError(f"Circular dependency detected: {cycle}")

        stack.append(module_id)
        module = registry.get_module(module_id)
        if module is not None:
            for dep in module.metadata.dependencies:
                if dep in requested_set:
                    visit(dep)
        stack.pop()
        visited.add(module_id)
        order.append(module_id)

    for module_id in requested:
        visit(module_id)
    return order


async def bootstrap_modules(registry: ModuleRegistry, plan: BootstrapPlan) -> BootstrapResult:
    """
    执行启动计划

    访问权限的授予与加载结果无关：加载失败的模块仍会获得授权，
    只是因为未加载而不会出现在路由/菜单聚合中。
    """
    result = BootstrapResult()

    for module in plan.modules:
        register_module(module, registry)

    try:
        result.order = resolve_load_order(registry, plan.load)
    except CircularDependencyError as e:
        logger.warning(f"{e}, falling back to declared load order")
        result.order = list(dict.fromkeys(plan.load))

    for module_id in result.order:
        ok, missing = registry.check_dependencies(module_id)
        if not ok and registry.get_module(module_id) is not None:
            logger.warning(f"Module [{module_id}] missing dependencies: {', '.join(missing)}")

        if await registry.load_module(module_id, plan.configs.get(module_id)):
            result.loaded.append(module_id)
        else:
            result.failed.append(module_id)

    grant = plan.load if plan.grant is None else plan.grant
    for module_id in grant:
        registry.set_module_access(module_id, True)
        result.granted.append(module_id)

    registry.mark_initialized()
    logger.info(
        f"Module bootstrap finished: {len(result.loaded)} loaded, "
        f"{len(result.failed)} failed, {len(result.granted)} granted"
    )
    return result


def plan_from_config(modules: Sequence[ModuleDefinition], config: Any) -> BootstrapPlan:
    """
    根据配置构建启动计划

    config.module_bootstrap 为 None 时加载全部模块；
    config.module_access 为 None 时授权与加载列表相同。
    """
    load = config.module_bootstrap
    if load is None:
        load = [m.id for m in modules]
    return BootstrapPlan(modules=list(modules), load=list(load), grant=config.module_access)


async def shutdown_modules(registry: ModuleRegistry) -> None:
    """按加载顺序的逆序卸载所有模块"""
    for module_id in reversed(registry.get_loaded_module_ids()):
        await registry.unload_module(module_id)
