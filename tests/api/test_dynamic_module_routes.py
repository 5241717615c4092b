"""
动态模块路由测试

覆盖 loading 占位、超时强制就绪、角色校验、通配子路由和状态变化后的重建
"""

import asyncio
import time

from fastapi import APIRouter, FastAPI
from fastapi.testclient import TestClient

from haalo.api.auth import create_access_token
from haalo.api.dynamic_routes import DynamicModuleRoutes
from haalo.core.modules import (
    LazyComponent,
    ModuleCategory,
    ModuleDefinition,
    ModuleMetadata,
    ModuleRegistry,
    RouteDefinition,
)


async def files_view():
    return {"view": "files"}


async def home_view():
    return {"view": "home"}


def build_router() -> APIRouter:
    router = APIRouter()

    @router.get("")
    async def index():
        return {"view": "reports"}

    @router.get("/{report_id}")
    async def detail(report_id: str):
        return {"view": "report", "id": report_id}

    return router


def make_registry() -> ModuleRegistry:
    registry = ModuleRegistry()
    registry.register(
        ModuleDefinition(
            id="x",
            metadata=ModuleMetadata(name="X", description="", category=ModuleCategory.CORE),
            routes=[
                RouteDefinition(path="/admin/x", component=home_view, exact=True),
                RouteDefinition(path="/admin/x/files", component=files_view, roles=["admin"]),
                RouteDefinition(path="/admin/x/reports", component=LazyComponent(build_router)),
                RouteDefinition(path="/admin/x/summary", component=LazyComponent(build_router), exact=True),
                RouteDefinition(path="/admin/x/broken", component=LazyComponent("haalo.nowhere:thing")),
            ],
        )
    )
    return registry


async def ready_registry() -> ModuleRegistry:
    registry = make_registry()
    await registry.load_module("x")
    registry.set_module_access("x", True)
    registry.mark_initialized()
    return registry


def build_client(registry: ModuleRegistry, prefix: str = "/admin/x", ready_timeout: float = 60.0):
    renderer = DynamicModuleRoutes(registry, prefix, ready_timeout=ready_timeout)
    app = FastAPI()
    app.mount(prefix, renderer)
    return TestClient(app), renderer


def auth_header(*roles: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': 'u1', 'roles': list(roles)})}"}


class TestReadiness:
    def test_loading_placeholder_before_ready(self) -> None:
        """注册中心未就绪时返回 loading 占位"""
        client, _ = build_client(make_registry())

        response = client.get("/admin/x/files")

        assert response.status_code == 503
        assert response.json()["status"] == "loading"
        assert response.headers["retry-after"] == "1"

    def test_timeout_forces_ready(self) -> None:
        """超过 ready_timeout 后即使未就绪也渲染已有路由"""
        registry = make_registry()
        asyncio.run(registry.load_module("x"))
        registry.set_module_access("x", True)
        client, renderer = build_client(registry, ready_timeout=0)

        response = client.get("/admin/x/files/readme", headers=auth_header("admin"))

        assert response.status_code == 200
        assert renderer.is_ready() is True
        assert registry.is_ready() is False

    def test_timeout_counts_from_first_request(self) -> None:
        """超时从首个请求开始计时，构建后的空闲时间不计入"""
        registry = make_registry()
        asyncio.run(registry.load_module("x"))
        registry.set_module_access("x", True)
        client, renderer = build_client(registry, ready_timeout=0.1)
        headers = auth_header("admin")

        time.sleep(0.2)
        assert renderer.is_ready() is False
        assert client.get("/admin/x/files", headers=headers).status_code == 503

        time.sleep(0.2)
        assert client.get("/admin/x/files", headers=headers).status_code == 200


class TestMounting:
    def setup_method(self) -> None:
        self.registry = asyncio.run(ready_registry())
        self.client, self.renderer = build_client(self.registry)

    def test_exact_callable_route(self) -> None:
        response = self.client.get("/admin/x/")

        assert response.status_code == 200
        assert response.json() == {"view": "home"}

    def test_wildcard_callable_handles_nested_paths(self) -> None:
        headers = auth_header("admin")

        assert self.client.get("/admin/x/files", headers=headers).json() == {"view": "files"}
        assert self.client.get("/admin/x/files/a/b", headers=headers).json() == {"view": "files"}

    def test_router_component_included(self) -> None:
        assert self.client.get("/admin/x/reports").json() == {"view": "reports"}
        assert self.client.get("/admin/x/reports/r1").json() == {"view": "report", "id": "r1"}

    def test_exact_router_only_mounts_root(self) -> None:
        assert self.client.get("/admin/x/summary").status_code == 200
        assert self.client.get("/admin/x/summary/r1").status_code == 404

    def test_unresolvable_component_is_skipped(self) -> None:
        self.client.get("/admin/x/")

        assert "broken/*" not in self.renderer.mounted_paths
        assert "files/*" in self.renderer.mounted_paths
        assert self.client.get("/admin/x/broken").status_code == 404

    def test_role_gate(self) -> None:
        """匿名 401，角色不匹配 403，匹配 200"""
        assert self.client.get("/admin/x/files").status_code == 401
        forbidden = self.client.get("/admin/x/files", headers=auth_header("employee"))
        assert forbidden.status_code == 403
        assert forbidden.json()["error"]["type"] == "permission_error"
        assert self.client.get("/admin/x/files", headers=auth_header("admin")).status_code == 200

    def test_rebuilds_when_access_revoked(self) -> None:
        assert self.client.get("/admin/x/reports").status_code == 200

        self.registry.set_module_access("x", False)

        assert self.client.get("/admin/x/reports").status_code == 404
        assert self.renderer.mounted_paths == []

    def test_close_unsubscribes(self) -> None:
        self.renderer.close()

        assert self.registry._listeners == []


def test_no_matching_routes_returns_404() -> None:
    registry = asyncio.run(ready_registry())
    client, renderer = build_client(registry, prefix="/case-management")

    assert client.get("/case-management/cases").status_code == 404
    assert renderer.mounted_paths == []
