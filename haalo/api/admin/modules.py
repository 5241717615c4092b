"""模块管理 API 端点"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel

from haalo.api.auth import RoleGate
from haalo.api.dependencies import get_registry
from haalo.core.enums import ADMIN_ROLES
from haalo.core.exceptions import NotFoundException
from haalo.core.modules import ModuleDefinition, ModuleRegistry, RouteDefinition
from haalo.core.modules.audit import audit_modules
from haalo.core.modules.lazy import LazyComponent

router = APIRouter(
    prefix="/api/admin/modules",
    tags=["Admin - Modules"],
    dependencies=[Depends(RoleGate(ADMIN_ROLES))],
)


# ========== Response Models ==========


class ModuleStatusResponse(BaseModel):
    """模块状态响应"""

    id: str
    name: str
    description: str
    version: str
    category: str
    status: str
    loading: bool
    loaded: bool
    access: bool
    visible: bool
    dependencies: List[str]
    missing_dependencies: List[str]
    route_count: int
    menu_count: int

    @classmethod
    def build(cls, registry: ModuleRegistry, module: ModuleDefinition) -> "ModuleStatusResponse":
        state = registry.get_state(module.id)
        meta = module.metadata
        return cls(
            id=module.id,
            name=meta.name,
            description=meta.description,
            version=meta.version,
            category=meta.category.value,
            status=meta.status.value,
            loading=state.loading,
            loaded=state.loaded,
            access=state.access,
            visible=state.visible,
            dependencies=list(meta.dependencies),
            missing_dependencies=state.missing_dependencies,
            route_count=len(module.routes),
            menu_count=len(module.menu),
        )


class RouteResponse(BaseModel):
    path: str
    exact: bool
    protected: bool
    roles: List[str]
    component: str

    @classmethod
    def from_route(cls, route: RouteDefinition) -> "RouteResponse":
        component = route.component
        if isinstance(component, LazyComponent):
            label = component.name
        else:
            label = getattr(component, "__qualname__", type(component).__name__)
        return cls(
            path=route.path,
            exact=route.exact,
            protected=route.protected,
            roles=list(route.roles),
            component=label,
        )


class SetModuleAccessRequest(BaseModel):
    """设置模块访问权限请求"""

    enabled: bool


class ModuleActionResponse(BaseModel):
    success: bool
    status: ModuleStatusResponse


class ReadinessResponse(BaseModel):
    ready: bool
    loading: bool
    loaded: List[str]
    registered: int


def _require_module(registry: ModuleRegistry, module_id: str) -> ModuleDefinition:
    module = registry.get_module(module_id)
    if module is None:
        raise NotFoundException(f"模块 '{module_id}' 不存在")
    return module


# ========== API Endpoints ==========


@router.get("/status", response_model=Dict[str, ModuleStatusResponse])
async def get_all_modules_status(registry: ModuleRegistry = Depends(get_registry)):
    """
    获取所有模块状态

    返回所有已注册模块的加载、授权状态，不按权限过滤。
    需要管理员权限。
    """
    return {
        module.id: ModuleStatusResponse.build(registry, module)
        for module in registry.get_all_modules()
    }


@router.get("/status/{module_id}", response_model=ModuleStatusResponse)
async def get_module_status(module_id: str, registry: ModuleRegistry = Depends(get_registry)):
    """获取单个模块状态"""
    module = _require_module(registry, module_id)
    return ModuleStatusResponse.build(registry, module)


@router.put("/status/{module_id}/access", response_model=ModuleStatusResponse)
async def set_module_access(
    module_id: str,
    payload: SetModuleAccessRequest,
    registry: ModuleRegistry = Depends(get_registry),
):
    """
    设置模块访问权限

    授权与加载状态独立：未加载的模块授权后只出现在目录中，
    加载完成后其路由和菜单才参与聚合。
    """
    module = _require_module(registry, module_id)
    registry.set_module_access(module_id, payload.enabled)
    return ModuleStatusResponse.build(registry, module)


@router.post("/{module_id}/load", response_model=ModuleActionResponse)
async def load_module(
    module_id: str,
    config: Optional[Dict[str, Any]] = Body(default=None),
    registry: ModuleRegistry = Depends(get_registry),
):
    """
    加载模块

    **请求体**（可选）: 覆盖模块默认配置的初始化参数。
    初始化失败时 success=false，具体原因见服务日志。
    """
    module = _require_module(registry, module_id)
    success = await registry.load_module(module_id, config)
    return ModuleActionResponse(success=success, status=ModuleStatusResponse.build(registry, module))


@router.post("/{module_id}/unload", response_model=ModuleActionResponse)
async def unload_module(module_id: str, registry: ModuleRegistry = Depends(get_registry)):
    """卸载模块；destroy 失败时模块保持已加载"""
    module = _require_module(registry, module_id)
    success = await registry.unload_module(module_id)
    return ModuleActionResponse(success=success, status=ModuleStatusResponse.build(registry, module))


@router.get("/routes", response_model=List[RouteResponse])
async def get_aggregated_routes(registry: ModuleRegistry = Depends(get_registry)):
    """已加载且有权限模块的聚合路由"""
    return [RouteResponse.from_route(route) for route in registry.get_all_routes()]


@router.get("/menu")
async def get_aggregated_menu(registry: ModuleRegistry = Depends(get_registry)):
    """聚合菜单（未按角色过滤）"""
    return [item.to_dict() for item in registry.get_all_menu_items()]


@router.get("/readiness", response_model=ReadinessResponse)
async def get_readiness(registry: ModuleRegistry = Depends(get_registry)):
    return ReadinessResponse(
        ready=registry.is_ready(),
        loading=registry.is_loading(),
        loaded=registry.get_loaded_module_ids(),
        registered=len(registry.get_all_modules()),
    )


@router.get("/audit")
async def get_module_audit(registry: ModuleRegistry = Depends(get_registry)):
    """模块注册审计：路由完整性与访问控制检查"""
    return [entry.to_dict() for entry in audit_modules(registry)]
