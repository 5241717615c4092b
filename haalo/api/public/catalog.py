"""模块目录 API（网格列表 + 单模块详情视图）"""

import inspect
from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from haalo.api.auth import require_authenticated
from haalo.api.dependencies import get_registry
from haalo.core.exceptions import ModuleNotReadyException, NotFoundException
from haalo.core.logger import logger
from haalo.core.modules import ModuleCategory, ModuleRegistry
from haalo.core.modules.catalog import CatalogEntry, build_catalog, build_entry
from haalo.core.modules.lazy import aresolve_component

CATALOG_PATH = "/api/modules/catalog"

router = APIRouter(
    prefix=CATALOG_PATH,
    tags=["Modules"],
    dependencies=[Depends(require_authenticated)],
)


class CatalogEntryResponse(BaseModel):
    """目录卡片"""

    id: str
    name: str
    description: str
    version: str
    icon: Optional[str]
    category: str
    status: str
    badge_color: str
    action_label: str
    is_premium: bool
    is_beta: bool
    is_coming_soon: bool
    requires_setup: bool
    loaded: bool
    has_component: bool

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "CatalogEntryResponse":
        return cls(**entry.to_dict())


class ModuleDetailResponse(BaseModel):
    module: CatalogEntryResponse
    view: Optional[Any] = None
    back_link: str = CATALOG_PATH


@router.get("", response_model=List[CatalogEntryResponse])
async def list_catalog(
    category: Optional[ModuleCategory] = None,
    registry: ModuleRegistry = Depends(get_registry),
):
    """
    模块目录

    展示当前租户有访问权限的模块（不要求已加载），
    status 决定徽标颜色与操作按钮：active→Configure, locked→Upgrade Required,
    not_installed→Install。

    **查询参数**:
    - `category`: 按模块分类过滤
    """
    return [CatalogEntryResponse.from_entry(entry) for entry in build_catalog(registry, category)]


@router.get("/{module_id}", response_model=ModuleDetailResponse)
async def get_module_detail(module_id: str, registry: ModuleRegistry = Depends(get_registry)):
    """
    选中模块后渲染其根组件

    组件通过 get_component() 延迟解析；选中状态不写回注册中心。
    """
    module = registry.get_module(module_id)
    if module is None or not registry.has_module_access(module_id):
        raise NotFoundException(f"模块 '{module_id}' 不存在")

    entry = CatalogEntryResponse.from_entry(build_entry(registry, module))
    if module.get_component is None:
        return ModuleDetailResponse(module=entry)

    try:
        component = await aresolve_component(module.get_component())
        if not callable(component):
            raise TypeError(f"component is {type(component).__name__}, expected a callable view")
        view = component()
        if inspect.isawaitable(view):
            view = await view
    except Exception as e:
        logger.error(f"Module [{module_id}] component failed to render: {e}")
        raise ModuleNotReadyException(f"模块 '{module_id}' 组件加载失败")

    return ModuleDetailResponse(module=entry, view=view)
