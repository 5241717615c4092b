"""
统一异常定义与全局异常处理器

所有错误响应使用同一结构：
    {"type": "error", "error": {"type": "...", "message": "..."}}
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from haalo.core.logger import logger


class HaaloException(Exception):
    """应用层异常基类"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "server_error"

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class InvalidRequestException(HaaloException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "invalid_request_error"


class UnauthorizedException(HaaloException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_type = "authentication_error"


class ForbiddenException(HaaloException):
    status_code = status.HTTP_403_FORBIDDEN
    error_type = "permission_error"


class NotFoundException(HaaloException):
    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found_error"


class ModuleNotReadyException(HaaloException):
    """模块尚未就绪（初始化中或组件加载失败）"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_type = "module_not_ready"


class CircularDependencyError(Exception):
    """模块依赖存在环"""


def error_body(error_type: str, message: str) -> Dict[str, Any]:
    return {"type": "error", "error": {"type": error_type, "message": message}}


class ExceptionHandlers:
    """全局异常处理器集合"""

    @staticmethod
    async def handle_app_exception(request: Request, exc: HaaloException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.error_type, exc.message),
            headers=exc.headers,
        )

    @staticmethod
    async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        error_type = "not_found_error" if exc.status_code == 404 else "http_error"
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(error_type, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @staticmethod
    async def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("server_error", "服务器内部错误"),
        )


def register_exception_handlers(app: FastAPI) -> None:
    """在主应用和动态子应用上安装同一组异常处理器"""
    app.add_exception_handler(HaaloException, ExceptionHandlers.handle_app_exception)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, ExceptionHandlers.handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, ExceptionHandlers.handle_generic_exception)
