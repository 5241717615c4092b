"""
延迟组件句柄

路由与目录中的组件通过 LazyComponent 引用，首次使用时才导入模块代码，
避免启动时加载所有功能模块的重依赖。
"""

from __future__ import annotations

import asyncio
import importlib
import threading
from typing import Any, Callable, Union

Target = Union[str, Callable[[], Any]]


class LazyComponent:
    """
    延迟解析的组件引用

    target 可以是 "package.module:attr" 形式的导入路径，也可以是无参工厂函数。
    解析结果会被缓存；resolve() 同步解析，aresolve() 在线程中执行导入。
    """

    def __init__(self, target: Target, name: str | None = None) -> None:
        if isinstance(target, str) and ":" not in target:
            raise ValueError(f"Invalid component path '{target}', expected 'module:attr'")
        self._target = target
        self._value: Any = None
        self._resolved = False
        self._lock = threading.Lock()
        if name:
            self.name = name
        elif isinstance(target, str):
            self.name = target
        else:
            self.name = getattr(target, "__qualname__", repr(target))

    @property
    def is_resolved(self) -> bool:
        return self._resolved

    def resolve(self) -> Any:
        """同步解析（已解析时直接返回缓存）"""
        if self._resolved:
            return self._value
        with self._lock:
            if not self._resolved:
                self._value = self._load()
                self._resolved = True
        return self._value

    async def aresolve(self) -> Any:
        """异步解析：导入可能较慢，放到线程里执行"""
        if self._resolved:
            return self._value
        return await asyncio.to_thread(self.resolve)

    def reset(self) -> None:
        """丢弃缓存（仅用于测试/热重载）"""
        with self._lock:
            self._value = None
            self._resolved = False

    def _load(self) -> Any:
        if callable(self._target):
            return self._target()

        module_path, _, attr_path = self._target.partition(":")
        obj: Any = importlib.import_module(module_path)
        for part in attr_path.split("."):
            obj = getattr(obj, part)
        return obj

    def __repr__(self) -> str:
        state = "resolved" if self._resolved else "pending"
        return f"<LazyComponent {self.name} ({state})>"


def resolve_component(ref: Any) -> Any:
    """把组件引用解析为具体对象（APIRouter 或可调用对象）"""
    if isinstance(ref, LazyComponent):
        return ref.resolve()
    return ref


async def aresolve_component(ref: Any) -> Any:
    if isinstance(ref, LazyComponent):
        return await ref.aresolve()
    return ref
