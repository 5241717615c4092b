#!/usr/bin/env python
"""
生成安全密钥和开发用令牌

用法: python generate_keys.py [role ...]
"""

import secrets
import sys

import jwt


def main() -> None:
    roles = sys.argv[1:] or ["super_admin"]

    # 生成JWT密钥
    jwt_key = secrets.token_urlsafe(32)

    dev_token = jwt.encode({"sub": "dev-user", "roles": roles}, jwt_key, algorithm="HS256")

    print("\n将以下内容添加到 .env 文件：\n")
    print(f"JWT_SECRET_KEY={jwt_key}")
    print()
    print(f"开发令牌（roles={','.join(roles)}，无过期时间）:")
    print(f"  Authorization: Bearer {dev_token}")
    print()
    print("注意:")
    print("  - JWT_SECRET_KEY 用于校验外部认证服务签发的令牌")
    print("  - 开发令牌只用于本地调试，不要在生产环境使用")
    print()


if __name__ == "__main__":
    main()
