"""
统一的枚举定义
避免重复定义造成的不一致
"""

from enum import Enum


class UserRole(str, Enum):
    """用户角色枚举（角色来源于外部认证服务签发的令牌）"""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    COMPANY_ADMIN = "company_admin"
    CLIENT_ADMIN = "client_admin"
    EMPLOYEE = "employee"
    LEARNER = "learner"


# 管理后台（模块管理、审计）允许的角色
ADMIN_ROLES = [UserRole.SUPER_ADMIN.value, UserRole.ADMIN.value]
