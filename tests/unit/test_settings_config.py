"""配置加载测试"""

import pytest

from haalo.config.settings import Config, _split_csv


def test_split_csv() -> None:
    assert _split_csv(None) is None
    assert _split_csv("a, b,,c ") == ["a", "b", "c"]
    assert _split_csv("") == []


def test_module_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("MODULE_BOOTSTRAP", "MODULE_ACCESS", "MODULE_ROUTE_PREFIXES", "MODULE_READY_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)

    cfg = Config()

    assert cfg.module_bootstrap is None
    assert cfg.module_access is None
    assert cfg.module_ready_timeout == 10.0
    assert "/payroll-iq" in cfg.module_route_prefixes


def test_module_lists_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODULE_BOOTSTRAP", "connect_iq,direct_deposit")
    monkeypatch.setenv("MODULE_ACCESS", "")
    monkeypatch.setenv("MODULE_ROUTE_PREFIXES", "/crm")
    monkeypatch.setenv("MODULE_READY_TIMEOUT", "2.5")

    cfg = Config()

    assert cfg.module_bootstrap == ["connect_iq", "direct_deposit"]
    # 显式设置为空表示不授予任何模块
    assert cfg.module_access == []
    assert cfg.module_route_prefixes == ["/crm"]
    assert cfg.module_ready_timeout == 2.5


def test_production_requires_strong_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("JWT_SECRET_KEY", "short")

    errors = Config().validate_security_config()

    assert len(errors) == 1
    assert "32 characters" in errors[0]


def test_development_has_no_security_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

    assert Config().validate_security_config() == []
