"""
模块化系统核心

提供可扩展的功能模块管理，支持：
- 显式注册的模块定义（元数据 + 路由 + 菜单 + 生命周期钩子）
- 加载状态 / 访问授权 双层控制
- 路由、菜单的聚合与按前缀挂载
- 延迟组件解析避免启动时加载重依赖
"""

from haalo.core.modules.base import (
    MenuItem,
    ModuleCategory,
    ModuleDefinition,
    ModuleLifecycleStatus,
    ModuleMetadata,
    ModuleState,
    RouteDefinition,
)
from haalo.core.modules.bootstrap import (
    BootstrapPlan,
    BootstrapResult,
    bootstrap_modules,
    plan_from_config,
    resolve_load_order,
    shutdown_modules,
)
from haalo.core.modules.lazy import LazyComponent, resolve_component
from haalo.core.modules.registration import register_module
from haalo.core.modules.registry import ModuleRegistry, RegistryEvent, get_module_registry

__all__ = [
    "BootstrapPlan",
    "BootstrapResult",
    "LazyComponent",
    "MenuItem",
    "ModuleCategory",
    "ModuleDefinition",
    "ModuleLifecycleStatus",
    "ModuleMetadata",
    "ModuleRegistry",
    "ModuleState",
    "RegistryEvent",
    "RouteDefinition",
    "bootstrap_modules",
    "get_module_registry",
    "plan_from_config",
    "register_module",
    "resolve_component",
    "resolve_load_order",
    "shutdown_modules",
]
