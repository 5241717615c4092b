"""
ACH 设置

保存当前租户的直接存款（ACH）参数；文件生成与传输不在此处理
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from haalo.core.logger import logger
from haalo.modules.direct_deposit.validation import is_valid_routing_number, mask_routing_number


@dataclass
class AchSettings:
    company_name: str = ""
    company_id: str = ""
    immediate_destination: str = ""
    immediate_origin: str = ""
    routing_number_validation: bool = True
    prenote_required: bool = True

    def to_public_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.immediate_destination:
            data["immediate_destination"] = mask_routing_number(self.immediate_destination)
        return data


class AchSettingsService:
    def __init__(self) -> None:
        self.settings: Optional[AchSettings] = None

    @property
    def configured(self) -> bool:
        return self.settings is not None

    def apply(self, config: Dict[str, Any]) -> AchSettings:
        """
        应用配置

        开启 routing_number_validation 时，immediate_destination 必须是合法的 ABA 路由号。

        Raises:
            ValueError: 路由号校验失败
        """
        known = {key: config[key] for key in AchSettings.__dataclass_fields__ if key in config}
        settings = AchSettings(**known)

        destination = settings.immediate_destination
        if settings.routing_number_validation and destination and not is_valid_routing_number(destination):
            raise ValueError(f"Invalid immediate destination routing number: {mask_routing_number(destination)}")

        self.settings = settings
        logger.debug(f"ACH settings applied for company '{settings.company_name or '-'}'")
        return settings

    def clear(self) -> None:
        self.settings = None


_ach_service: AchSettingsService | None = None


def get_ach_service() -> AchSettingsService:
    global _ach_service
    if _ach_service is None:
        _ach_service = AchSettingsService()
    return _ach_service
