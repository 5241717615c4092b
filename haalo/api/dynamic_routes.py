"""
动态模块路由（纯 ASGI 实现）

把注册中心聚合出的、已加载且有权限的模块路由按路径前缀挂载。

- 注册中心就绪前返回 loading 占位响应（503），不阻塞请求
- 自首个 HTTP 请求起超过 ready_timeout 仍未就绪时强制视为就绪，保证不会一直停在 loading
- 订阅注册中心事件，状态变化后在下一个请求时重建内部子应用
- 没有匹配前缀的路由时内部子应用为空，所有请求返回 404
"""

from __future__ import annotations

import time
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI
from fastapi.responses import JSONResponse
from starlette.types import Receive, Scope, Send

from haalo.api.auth import RoleGate
from haalo.config import config
from haalo.core.exceptions import register_exception_handlers
from haalo.core.logger import logger
from haalo.core.modules import ModuleRegistry, RegistryEvent, RouteDefinition, resolve_component
from haalo.core.modules.routing import WILDCARD, match_routes, relative_mount_path


def _root_routes_only(router: APIRouter) -> APIRouter:
    """exact 路由只挂载组件路由器的根路径"""
    root = APIRouter()
    root.routes = [r for r in router.routes if getattr(r, "path", None) in ("", "/")]
    return root


class DynamicModuleRoutes:
    """
    按前缀挂载模块路由的 ASGI 应用

    用法: app.mount("/admin/connectiq", DynamicModuleRoutes(registry, "/admin/connectiq"))
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        path_prefix: str,
        ready_timeout: Optional[float] = None,
    ) -> None:
        self.registry = registry
        self.path_prefix = path_prefix.rstrip("/") or "/"
        self.ready_timeout = config.module_ready_timeout if ready_timeout is None else ready_timeout
        # 超时从首个 HTTP 请求开始计时
        self._deadline: Optional[float] = None
        self._forced_ready = False

        self._app: Optional[FastAPI] = None
        self._stale = True
        self.mounted_paths: list[str] = []

        self._unsubscribe = registry.subscribe(self._on_registry_event)

    def _on_registry_event(self, event: RegistryEvent, module_id: Optional[str]) -> None:
        self._stale = True

    def close(self) -> None:
        """取消注册中心订阅"""
        self._unsubscribe()

    # ========== 就绪判断 ==========

    def is_ready(self) -> bool:
        if self._forced_ready or self.registry.is_ready():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._forced_ready = True
            self._stale = True
            logger.warning(
                f"Dynamic routes [{self.path_prefix}]: registry not ready after "
                f"{self.ready_timeout}s, rendering available routes anyway"
            )
            return True
        return False

    # ========== 子应用构建 ==========

    def get_app(self) -> FastAPI:
        if self._app is None or self._stale:
            self._stale = False
            self._app = self.build_app()
        return self._app

    def build_app(self) -> FastAPI:
        app = FastAPI(openapi_url=None, docs_url=None, redoc_url=None)
        register_exception_handlers(app)

        self.mounted_paths = []
        routes = match_routes(self.registry.get_all_routes(), self.path_prefix)
        for route in routes:
            try:
                self._mount_route(app, route)
            except Exception as e:
                logger.error(f"Dynamic routes [{self.path_prefix}]: failed to mount {route.path}: {e}")

        logger.debug(
            f"Dynamic routes [{self.path_prefix}] rebuilt: {len(self.mounted_paths)}/{len(routes)} mounted"
        )
        return app

    def _mount_route(self, app: FastAPI, route: RouteDefinition) -> None:
        mount_path = relative_mount_path(route, self.path_prefix)
        wildcard = mount_path.endswith(f"/{WILDCARD}")
        base = mount_path[: -len(WILDCARD) - 1] if wildcard else mount_path
        path = f"/{base}" if base else ""

        component = resolve_component(route.component)
        dependencies = [Depends(RoleGate(route.roles))] if route.roles else []

        if isinstance(component, APIRouter):
            router = _root_routes_only(component) if route.exact else component
            app.include_router(router, prefix=path, dependencies=dependencies)
        elif callable(component):
            app.add_api_route(path or "/", component, methods=["GET"], dependencies=dependencies)
            if wildcard:
                app.add_api_route(
                    f"{path}/{{subpath:path}}", component, methods=["GET"], dependencies=dependencies
                )
        else:
            raise TypeError(f"unsupported component type {type(component).__name__}")

        self.mounted_paths.append(mount_path)

    # ========== ASGI ==========

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and self._deadline is None:
            self._deadline = time.monotonic() + max(self.ready_timeout, 0.0)
        if scope["type"] == "http" and not self.is_ready():
            response = JSONResponse(
                status_code=503,
                content={"status": "loading", "prefix": self.path_prefix},
                headers={"Retry-After": "1"},
            )
            await response(scope, receive, send)
            return

        await self.get_app()(scope, receive, send)
