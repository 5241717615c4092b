"""
主应用入口

模块注册中心在应用创建时生成，挂到 app.state.module_registry，
启动时按计划注册/加载模块，动态路由按前缀挂载模块路由
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from haalo import __version__ as app_version
from haalo.api.admin import router as admin_router
from haalo.api.dynamic_routes import DynamicModuleRoutes
from haalo.api.public import router as public_router
from haalo.config import config
from haalo.core.exceptions import register_exception_handlers
from haalo.core.logger import logger
from haalo.core.modules import (
    BootstrapPlan,
    ModuleRegistry,
    bootstrap_modules,
    get_module_registry,
    plan_from_config,
    shutdown_modules,
)

openapi_tags = [
    {
        "name": "Modules",
        "description": "模块目录，展示当前租户可用的功能模块",
    },
    {
        "name": "Navigation",
        "description": "按角色过滤后的模块导航菜单",
    },
    {
        "name": "Admin - Modules",
        "description": "模块加载、授权与审计（管理员）",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """应用生命周期管理"""
    import logging

    logging.getLogger("uvicorn.access").setLevel(logging.CRITICAL)
    logging.getLogger("uvicorn.access").disabled = True

    logger.info("=" * 60)
    logger.info(f"HaaLO Module Platform v{app_version}")
    logger.info("=" * 60)

    # 安全配置验证（生产环境会阻止启动）
    security_errors = config.validate_security_config()
    if security_errors:
        for error in security_errors:
            logger.error(f"[SECURITY] {error}")
        if config.environment == "production":
            raise RuntimeError(
                "Security configuration errors detected. "
                "Please fix the following issues before starting in production:\n"
                + "\n".join(f"  - {e}" for e in security_errors)
            )

    config.log_startup_warnings()

    registry: ModuleRegistry = app.state.module_registry
    plan: Optional[BootstrapPlan] = app.state.bootstrap_plan
    if plan is None:
        from haalo.modules import ALL_MODULES

        plan = plan_from_config(ALL_MODULES, config)

    logger.info("初始化功能模块系统...")
    result = await bootstrap_modules(registry, plan)
    if result.failed:
        logger.warning(f"以下模块加载失败: {', '.join(result.failed)}")

    logger.info(f"服务启动成功: http://{config.host}:{config.port}")
    logger.info("=" * 60)

    yield

    logger.info("正在关闭服务...")

    for renderer in app.state.dynamic_routes:
        renderer.close()

    logger.info("关闭功能模块...")
    await shutdown_modules(registry)

    logger.info("服务已关闭")


def create_app(
    registry: Optional[ModuleRegistry] = None,
    plan: Optional[BootstrapPlan] = None,
) -> FastAPI:
    """
    创建应用

    Args:
        registry: 模块注册中心，默认使用进程默认实例
        plan: 启动计划，默认根据 MODULE_BOOTSTRAP / MODULE_ACCESS 从 ALL_MODULES 构建
    """
    app = FastAPI(
        title="HaaLO Module Platform",
        version=app_version,
        lifespan=lifespan,
        docs_url="/docs" if config.docs_enabled else None,
        redoc_url="/redoc" if config.docs_enabled else None,
        openapi_url="/openapi.json" if config.docs_enabled else None,
        openapi_tags=openapi_tags,
    )

    if registry is None:
        registry = get_module_registry()
    app.state.module_registry = registry
    app.state.bootstrap_plan = plan

    register_exception_handlers(app)

    if config.cors_origins:
        # CORS_ORIGINS=* 时自动禁用 credentials（浏览器规范要求）
        allow_credentials = config.cors_allow_credentials and "*" not in config.cors_origins
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=allow_credentials,
            allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
            allow_headers=["*"],
        )
        logger.info(f"CORS已启用,允许的源: {config.cors_origins}, credentials: {allow_credentials}")

    app.include_router(admin_router)  # 管理员端点
    app.include_router(public_router)  # 目录与导航

    @app.get("/health", include_in_schema=False)
    async def health():
        return {
            "status": "ok",
            "version": app_version,
            "modules_ready": registry.is_ready(),
            "loaded_modules": len(registry.get_loaded_module_ids()),
        }

    # 动态模块路由放在最后挂载，避免遮挡固定的 API 路由
    app.state.dynamic_routes = []
    for prefix in config.module_route_prefixes:
        renderer = DynamicModuleRoutes(registry, prefix)
        app.mount(renderer.path_prefix, renderer)
        app.state.dynamic_routes.append(renderer)
        logger.debug(f"动态模块路由已挂载: {renderer.path_prefix}")

    return app


app = create_app()


def main() -> Any:
    log_level = config.log_level.split()[0].lower()
    if log_level not in ["debug", "info", "warning", "error", "critical"]:
        log_level = "info"

    # 自定义uvicorn日志配置,完全禁用access日志
    uvicorn_log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(levelprefix)s %(message)s",
                "use_colors": True,
            },
        },
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": log_level.upper()},
            "uvicorn.error": {"level": log_level.upper()},
            "uvicorn.access": {"handlers": [], "level": "CRITICAL"},
        },
    }

    uvicorn.run(
        "haalo.main:app",
        host=config.host,
        port=config.port,
        log_level=log_level,
        reload=config.environment == "development",
        access_log=False,
        log_config=uvicorn_log_config,
    )


if __name__ == "__main__":
    main()
