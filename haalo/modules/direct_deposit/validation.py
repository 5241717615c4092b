"""ABA 路由号校验"""

import re

_ROUTING_RE = re.compile(r"^\d{9}$")

# 3-7-1 权重
_WEIGHTS = (3, 7, 1, 3, 7, 1, 3, 7, 1)


def is_valid_routing_number(routing_number: str) -> bool:
    """
    9 位数字，且 3*(d1+d4+d7) + 7*(d2+d5+d8) + (d3+d6+d9) 能被 10 整除
    """
    if not routing_number or not _ROUTING_RE.match(routing_number):
        return False
    total = sum(int(digit) * weight for digit, weight in zip(routing_number, _WEIGHTS))
    return total % 10 == 0


def mask_routing_number(routing_number: str) -> str:
    if len(routing_number) <= 4:
        return routing_number
    return "*" * (len(routing_number) - 4) + routing_number[-4:]
