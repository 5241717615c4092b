"""
请求主体与角色校验

令牌由外部认证服务签发，这里只校验签名并读取 roles 声明
"""

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

import jwt
from fastapi import Depends, Request

from haalo.config import config
from haalo.core.exceptions import ForbiddenException, UnauthorizedException
from haalo.core.logger import logger
from haalo.core.modules.routing import roles_permit

if not config.jwt_secret_key:
    # 如果没有配置，生成一个随机密钥并警告
    if config.environment == "production":
        raise ValueError("JWT_SECRET_KEY must be set in production environment!")
    config.jwt_secret_key = secrets.token_urlsafe(32)
    logger.warning("JWT_SECRET_KEY未在环境变量中找到，已生成随机密钥用于开发")


@dataclass
class Principal:
    """当前请求主体"""

    user_id: Optional[str] = None
    roles: List[str] = field(default_factory=list)
    authenticated: bool = False

    @classmethod
    def anonymous(cls) -> "Principal":
        return cls()


def create_access_token(data: Dict[str, Any], expires_hours: Optional[int] = None) -> str:
    """创建JWT访问令牌（开发工具与测试使用）"""
    to_encode = data.copy()
    hours = expires_hours if expires_hours is not None else config.jwt_expiration_hours
    to_encode["exp"] = datetime.now(timezone.utc) + timedelta(hours=hours)
    return jwt.encode(to_encode, config.jwt_secret_key, algorithm=config.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, config.jwt_secret_key, algorithms=[config.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedException("Token已过期")
    except jwt.InvalidTokenError:
        raise UnauthorizedException("无效的Token")


def _extract_roles(payload: Dict[str, Any]) -> List[str]:
    roles = payload.get("roles")
    if isinstance(roles, str):
        return [roles]
    if isinstance(roles, list):
        return [str(role) for role in roles]
    role = payload.get("role")
    return [str(role)] if role else []


async def get_current_principal(request: Request) -> Principal:
    """
    解析请求主体

    没有 Authorization 头时返回匿名主体；令牌无效时返回 401
    """
    principal = getattr(request.state, "principal", None)
    if isinstance(principal, Principal):
        return principal

    authorization = request.headers.get("authorization")
    if not authorization:
        return Principal.anonymous()

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedException("Authorization 头格式错误，需要 Bearer Token")

    payload = decode_token(token.strip())
    sub = payload.get("sub")
    principal = Principal(
        user_id=str(sub) if sub is not None else None,
        roles=_extract_roles(payload),
        authenticated=True,
    )
    request.state.principal = principal
    return principal


async def require_authenticated(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if not principal.authenticated:
        raise UnauthorizedException("需要登录后访问")
    return principal


class RoleGate:
    """
    角色校验依赖

    roles 为空时不做限制；匿名访问受限资源返回 401，角色不匹配返回 403
    """

    def __init__(self, roles: Iterable[str]) -> None:
        self.roles = list(roles)

    async def __call__(self, principal: Principal = Depends(get_current_principal)) -> Principal:
        if not self.roles:
            return principal
        if not principal.authenticated:
            raise UnauthorizedException("需要登录后访问")
        if not roles_permit(self.roles, principal.roles):
            raise ForbiddenException(f"需要以下角色之一: {', '.join(self.roles)}")
        return principal

    def __repr__(self) -> str:
        return f"RoleGate({self.roles!r})"
