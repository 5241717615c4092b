"""模块菜单按角色过滤"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Sequence

from haalo.core.modules.base import MenuItem
from haalo.core.modules.routing import roles_permit


def filter_menu_for_roles(items: Sequence[MenuItem], roles: Iterable[str]) -> List[MenuItem]:
    """
    递归过滤菜单

    - required_roles 与当前角色无交集的节点连同子树一起移除
    - 子节点全部被移除且自身没有 path 的分组节点也移除
    返回新的 MenuItem，不修改注册中心里的定义
    """
    granted = list(roles)
    result: List[MenuItem] = []
    for item in items:
        if not roles_permit(item.required_roles, granted):
            continue

        if item.children:
            children = filter_menu_for_roles(item.children, granted)
            if not children and not item.path:
                continue
            result.append(replace(item, children=children))
        else:
            result.append(replace(item))
    return result


def count_menu_items(items: Sequence[MenuItem]) -> int:
    return sum(1 + count_menu_items(item.children) for item in items)
