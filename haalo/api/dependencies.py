"""API 公共依赖"""

from fastapi import Request

from haalo.core.modules import ModuleRegistry


def get_registry(request: Request) -> ModuleRegistry:
    """从应用状态中取出启动时创建的模块注册中心"""
    return request.app.state.module_registry
