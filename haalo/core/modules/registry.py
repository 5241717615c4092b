"""
模块注册中心

负责模块的注册、加载状态、访问授权和聚合查询
"""

from __future__ import annotations

import asyncio
import contextvars
import inspect
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from haalo.core.logger import logger
from haalo.core.modules.base import (
    MenuItem,
    ModuleCategory,
    ModuleDefinition,
    ModuleState,
    RouteDefinition,
)


class RegistryEvent(str, Enum):
    """注册中心状态变化事件"""

    REGISTERED = "registered"
    LOADING = "loading"
    LOADED = "loaded"
    LOAD_FAILED = "load_failed"
    UNLOADED = "unloaded"
    ACCESS_CHANGED = "access_changed"
    INITIALIZED = "initialized"


RegistryListener = Callable[[RegistryEvent, Optional[str]], None]

# 当前调用链中正在执行 initialize 的 (注册中心, 模块 ID)
_load_chain: contextvars.ContextVar[frozenset[tuple[int, str]]] = contextvars.ContextVar(
    "module_load_chain", default=frozenset()
)


class ModuleRegistry:
    """
    模块注册中心

    职责：
    - 注册模块定义（同 ID 重复注册时后者覆盖前者）
    - 驱动模块 initialize / destroy 生命周期
    - 管理模块访问授权（与加载状态相互独立）
    - 聚合已加载且有权限模块的路由和菜单

    路由和菜单仅在模块 已加载 且 有访问权限 时参与聚合，两者缺一不可。
    所有失败都只记录日志并以布尔值/空集合返回，不向调用方抛异常。

    应用启动时创建一次并显式传给各消费者（app.state.module_registry），
    get_module_registry() 仅提供进程默认实例。
    """

    _instance: ModuleRegistry | None = None

    def __init__(self) -> None:
        self._modules: dict[str, ModuleDefinition] = {}
        # dict 作为有序集合：迭代顺序 = 加载完成顺序
        self._loaded: dict[str, None] = {}
        self._loading: set[str] = set()
        # 进行中的加载，并发调用方共同等待同一个结果
        self._pending: dict[str, asyncio.Future[bool]] = {}
        self._access: dict[str, bool] = {}
        self._initialized = False
        self._revision = 0
        self._listeners: list[RegistryListener] = []

    @classmethod
    def get_instance(cls) -> ModuleRegistry:
        """获取进程默认实例"""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """重置默认实例（仅用于测试）"""
        cls._instance = None

    # ========== 注册 ==========

    def register(self, module: ModuleDefinition) -> None:
        """
        注册模块

        不做去重：同 ID 再次注册会静默替换已存储的定义，仅输出 debug 日志
        """
        if module.id in self._modules:
            logger.debug(f"Module [{module.id}] already registered, replacing definition")
        self._modules[module.id] = module
        logger.debug(f"Module [{module.id}] registered")
        self._notify(RegistryEvent.REGISTERED, module.id)

    def get_module(self, module_id: str) -> ModuleDefinition | None:
        """获取模块定义，不存在时返回 None"""
        return self._modules.get(module_id)

    def get_all_modules(self) -> list[ModuleDefinition]:
        """获取所有已注册模块（不按加载状态或权限过滤）"""
        return list(self._modules.values())

    def get_modules_by_category(self, category: ModuleCategory | str) -> list[ModuleDefinition]:
        value = category.value if isinstance(category, ModuleCategory) else category
        return [m for m in self._modules.values() if m.metadata.category.value == value]

    # ========== 加载 / 卸载 ==========

    async def load_module(self, module_id: str, config: Optional[Dict[str, Any]] = None) -> bool:
        """
        加载模块（执行 initialize 钩子）

        - 未注册: 返回 False
        - 已加载: 直接返回 True，不重复初始化
        - 加载中: 等待进行中的那次加载并返回其真实结果
        - 从自身 initialize 调用链中再次加载（自加载或 A→B→A）: 记录警告并返回 False
        - 否则执行 initialize；失败时记录日志并返回 False，不重试

        Args:
            module_id: 模块 ID
            config: 覆盖模块 configuration 的初始化配置
        """
        module = self._modules.get(module_id)
        if module is None:
            logger.warning(f"Module [{module_id}] not registered, cannot load")
            return False

        if module_id in self._loaded:
            return True

        chain_key = (id(self), module_id)
        chain = _load_chain.get()
        if chain_key in chain:
            # 等待自己的 pending future 会永久挂起
            logger.warning(f"Module [{module_id}] requested from its own initialize chain, skipping")
            return False

        pending = self._pending.get(module_id)
        if pending is not None:
            # shield: 某个等待方被取消时不影响共享结果
            return await asyncio.shield(pending)

        waiter: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
        self._pending[module_id] = waiter
        self._loading.add(module_id)
        self._notify(RegistryEvent.LOADING, module_id)

        init_config = {**module.configuration, **(config or {})}
        success = False
        token = _load_chain.set(chain | {chain_key})
        try:
            if module.initialize is not None:
                result = module.initialize(init_config)
                if inspect.isawaitable(result):
                    await result
            success = True
        except Exception as e:
            logger.error(f"Module [{module_id}] initialize failed: {e}")
        finally:
            _load_chain.reset(token)
            self._loading.discard(module_id)
            self._pending.pop(module_id, None)
            if success:
                self._loaded[module_id] = None
            if not waiter.done():
                waiter.set_result(success)
            self._notify(RegistryEvent.LOADED if success else RegistryEvent.LOAD_FAILED, module_id)

        if success:
            logger.info(f"Module [{module_id}] loaded")
        return success

    async def unload_module(self, module_id: str) -> bool:
        """
        卸载模块（执行 destroy 钩子）

        仅对已加载模块生效；destroy 失败时模块保持已加载状态并返回 False
        """
        if module_id not in self._loaded:
            return False

        module = self._modules.get(module_id)
        try:
            if module is not None and module.destroy is not None:
                result = module.destroy()
                if inspect.isawaitable(result):
                    await result
        except Exception as e:
            logger.error(f"Module [{module_id}] destroy failed, keeping it loaded: {e}")
            return False

        self._loaded.pop(module_id, None)
        logger.info(f"Module [{module_id}] unloaded")
        self._notify(RegistryEvent.UNLOADED, module_id)
        return True

    def is_module_loaded(self, module_id: str) -> bool:
        return module_id in self._loaded

    def get_loaded_module_ids(self) -> list[str]:
        """已加载模块 ID（按加载完成顺序）"""
        return list(self._loaded)

    # ========== 访问授权 ==========

    def set_module_access(self, module_id: str, has_access: bool) -> None:
        """设置模块访问权限（与加载状态独立，可随时调用）"""
        self._access[module_id] = bool(has_access)
        logger.debug(f"Module [{module_id}] access set to {bool(has_access)}")
        self._notify(RegistryEvent.ACCESS_CHANGED, module_id)

    def has_module_access(self, module_id: str) -> bool:
        return self._access.get(module_id, False)

    # ========== 聚合查询 ==========

    def _visible_modules(self) -> list[ModuleDefinition]:
        """已加载且有权限的模块，按加载完成顺序"""
        result = []
        for module_id in self._loaded:
            module = self._modules.get(module_id)
            if module is not None and self.has_module_access(module_id):
                result.append(module)
        return result

    def get_all_routes(self) -> list[RouteDefinition]:
        """聚合路由；模块内保持声明顺序，模块间顺序不作保证"""
        routes: list[RouteDefinition] = []
        for module in self._visible_modules():
            routes.extend(module.routes)
        return routes

    def get_all_menu_items(self) -> list[MenuItem]:
        items: list[MenuItem] = []
        for module in self._visible_modules():
            if module.menu:
                items.extend(module.menu)
        return items

    def get_accessible_modules(self) -> list[ModuleDefinition]:
        """有访问权限的模块（不关心加载状态，用于目录展示）"""
        return [m for m in self._modules.values() if self.has_module_access(m.id)]

    # ========== 就绪状态 ==========

    def is_loading(self) -> bool:
        return bool(self._loading)

    def is_ready(self) -> bool:
        return self._initialized and not self._loading

    def mark_initialized(self) -> None:
        """启动流程完成后调用一次，不可撤销"""
        if self._initialized:
            return
        self._initialized = True
        logger.info(f"Module registry initialized: {len(self._loaded)}/{len(self._modules)} loaded")
        self._notify(RegistryEvent.INITIALIZED, None)

    async def wait_until_ready(self, timeout: float | None = None) -> bool:
        """
        等待注册中心就绪（事件驱动）

        Returns:
            是否在超时前就绪
        """
        if self.is_ready():
            return True

        waiter: asyncio.Future[bool] = asyncio.get_running_loop().create_future()

        def _on_change(event: RegistryEvent, module_id: Optional[str]) -> None:
            if self.is_ready() and not waiter.done():
                waiter.set_result(True)

        unsubscribe = self.subscribe(_on_change)
        try:
            await asyncio.wait_for(waiter, timeout)
            return True
        except asyncio.TimeoutError:
            logger.warning(f"Module registry not ready after {timeout}s")
            return False
        finally:
            unsubscribe()

    # ========== 事件订阅 ==========

    @property
    def revision(self) -> int:
        """每次状态变化递增，供消费者做缓存失效判断"""
        return self._revision

    def subscribe(self, listener: RegistryListener) -> Callable[[], None]:
        """
        订阅状态变化

        Returns:
            取消订阅函数
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: RegistryEvent, module_id: Optional[str]) -> None:
        self._revision += 1
        for listener in list(self._listeners):
            try:
                listener(event, module_id)
            except Exception as e:
                logger.warning(f"Module registry listener failed on {event.value}: {e}")

    # ========== 依赖与状态 ==========

    def check_dependencies(self, module_id: str) -> tuple[bool, list[str]]:
        """
        检查模块声明的依赖是否都已注册

        Returns:
            (all_satisfied, missing_dependencies)
        """
        module = self._modules.get(module_id)
        if module is None:
            return False, [module_id]

        missing = [dep for dep in module.metadata.dependencies if dep not in self._modules]
        return not missing, missing

    def get_state(self, module_id: str) -> ModuleState:
        _, missing = self.check_dependencies(module_id) if module_id in self._modules else (True, [])
        return ModuleState(
            id=module_id,
            registered=module_id in self._modules,
            loading=module_id in self._loading,
            loaded=module_id in self._loaded,
            access=self.has_module_access(module_id),
            missing_dependencies=missing,
        )


def get_module_registry() -> ModuleRegistry:
    """获取进程默认的模块注册中心实例"""
    return ModuleRegistry.get_instance()
