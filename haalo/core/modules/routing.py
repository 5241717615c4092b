"""
模块路由匹配

纯函数，供动态路由挂载和管理接口复用
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from haalo.core.modules.base import RouteDefinition

WILDCARD = "*"


def match_routes(routes: Iterable[RouteDefinition], prefix: str) -> List[RouteDefinition]:
    """筛选路径以 prefix 开头的路由，保持原有顺序"""
    return [route for route in routes if route.path.startswith(prefix)]


def relative_mount_path(route: RouteDefinition, prefix: str) -> str:
    """
    计算相对挂载路径

    去掉前缀和开头的斜杠；非 exact 且剩余路径非空时追加通配段，
    让组件自己处理嵌套子路由。

    例: /admin/connectiq/deals, 前缀 /admin/connectiq -> "deals/*"
    """
    remaining = route.path[len(prefix):] if route.path.startswith(prefix) else route.path
    remaining = remaining.strip("/")
    if not route.exact and remaining:
        return f"{remaining}/{WILDCARD}"
    return remaining


def roles_permit(required: Sequence[str], granted: Iterable[str]) -> bool:
    """required 为空表示不限制角色；否则要求至少有一个交集"""
    if not required:
        return True
    return bool(set(required) & set(granted))
