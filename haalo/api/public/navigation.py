"""导航菜单 API"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from haalo.api.auth import Principal, get_current_principal
from haalo.api.dependencies import get_registry
from haalo.core.modules import ModuleRegistry
from haalo.core.modules.navigation import filter_menu_for_roles

router = APIRouter(prefix="/api/navigation", tags=["Navigation"])


class NavigationMenuResponse(BaseModel):
    ready: bool
    items: List[Dict[str, Any]]


@router.get("/menu", response_model=NavigationMenuResponse)
async def get_navigation_menu(
    principal: Principal = Depends(get_current_principal),
    registry: ModuleRegistry = Depends(get_registry),
):
    """
    获取模块菜单

    聚合已加载且有权限模块的菜单，并按当前用户角色过滤 required_roles。
    ready=false 时前端应显示加载状态并稍后重试。
    """
    items = filter_menu_for_roles(registry.get_all_menu_items(), principal.roles)
    return NavigationMenuResponse(ready=registry.is_ready(), items=[item.to_dict() for item in items])
