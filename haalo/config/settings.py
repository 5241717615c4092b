"""
服务器配置
从环境变量或 .env 文件加载配置
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

env_file = Path(".env")
if env_file.exists():
    load_dotenv(env_file)


def _split_csv(raw: Optional[str]) -> Optional[List[str]]:
    """逗号分隔字符串 -> 列表；未设置时返回 None（表示使用默认值）"""
    if raw is None:
        return None
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    def __init__(self) -> None:
        # 服务器配置
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", "8090"))
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        # 文件日志目录（为空则只输出到 stderr）
        self.log_dir = os.getenv("LOG_DIR", "")

        # 环境配置
        self.environment = os.getenv("ENVIRONMENT", "development")

        # JWT配置（令牌由外部认证服务签发，这里只负责校验并读取角色）
        self.jwt_secret_key = os.getenv("JWT_SECRET_KEY", None)
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
        self.jwt_expiration_hours = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))

        # API 文档开关（生产环境默认关闭）
        docs_default = "false" if self.environment == "production" else "true"
        self.docs_enabled = os.getenv("DOCS_ENABLED", docs_default).lower() == "true"

        # CORS配置
        # 格式: 逗号分隔的域名列表,如 "http://localhost:3000,https://example.com"
        cors_origins = _split_csv(os.getenv("CORS_ORIGINS"))
        if cors_origins:
            self.cors_origins = cors_origins
        elif self.environment == "development":
            self.cors_origins = [
                "http://localhost:3000",
                "http://localhost:5173",  # Vite 默认端口
                "http://127.0.0.1:3000",
                "http://127.0.0.1:5173",
            ]
        else:
            # 生产环境默认不允许跨域,必须显式配置
            self.cors_origins = []
        self.cors_allow_credentials = os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"

        # 模块系统配置
        # MODULE_READY_TIMEOUT: 动态路由等待注册中心就绪的最长时间（秒），超时后强制渲染
        # MODULE_BOOTSTRAP: 启动时加载的模块 ID 列表，未设置则加载全部内置模块
        # MODULE_ACCESS: 启动时授予访问权限的模块 ID 列表，未设置则与加载列表相同
        # MODULE_ROUTE_PREFIXES: 由动态路由挂载的路径前缀
        self.module_ready_timeout = float(os.getenv("MODULE_READY_TIMEOUT", "10"))
        self.module_bootstrap = _split_csv(os.getenv("MODULE_BOOTSTRAP"))
        self.module_access = _split_csv(os.getenv("MODULE_ACCESS"))
        self.module_route_prefixes = _split_csv(os.getenv("MODULE_ROUTE_PREFIXES")) or [
            "/admin/connectiq",
            "/payroll-iq",
            "/case-management",
        ]

    def log_startup_warnings(self) -> None:
        """
        记录启动时的配置警告
        这个方法应该在 logger 初始化后调用
        """
        from haalo.core.logger import logger

        if not self.jwt_secret_key:
            if self.environment == "production":
                logger.error(
                    "生产环境未设置 JWT_SECRET_KEY! 所有受保护路由都将拒绝访问。"
                    "使用 'python generate_keys.py' 生成安全密钥。"
                )
            else:
                logger.warning("JWT_SECRET_KEY 未设置，将使用开发环境默认密钥")

        if self.environment == "production" and not self.cors_origins:
            logger.warning("生产环境 CORS 未配置，前端将无法访问 API。请设置 CORS_ORIGINS。")

        if self.module_ready_timeout <= 0:
            logger.warning("MODULE_READY_TIMEOUT <= 0，动态路由将不等待模块初始化直接渲染")

    def validate_security_config(self) -> list[str]:
        """
        验证安全配置，返回错误列表
        生产环境会阻止启动，开发环境仅警告

        Returns:
            错误消息列表（空列表表示验证通过）
        """
        errors: list[str] = []

        if self.environment == "production":
            if not self.jwt_secret_key:
                errors.append(
                    "JWT_SECRET_KEY must be set in production. "
                    "Use 'python generate_keys.py' to generate a secure key."
                )
            elif len(self.jwt_secret_key) < 32:
                errors.append("JWT_SECRET_KEY must be at least 32 characters in production.")

        return errors

    def __repr__(self):
        """配置信息字符串表示"""
        return f"""
Configuration:
  Server: {self.host}:{self.port}
  Log Level: {self.log_level}
  Environment: {self.environment}
  Module Prefixes: {", ".join(self.module_route_prefixes)}
"""


# 创建全局配置实例
config = Config()
