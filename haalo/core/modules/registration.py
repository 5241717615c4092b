"""模块注册辅助函数"""

from __future__ import annotations

from typing import Optional

from haalo.core.modules.base import ModuleDefinition
from haalo.core.modules.registry import ModuleRegistry, get_module_registry


def register_module(
    module: ModuleDefinition, registry: Optional[ModuleRegistry] = None
) -> ModuleDefinition:
    """注册模块并原样返回定义，便于声明与注册写在同一个表达式里"""
    (registry or get_module_registry()).register(module)
    return module
