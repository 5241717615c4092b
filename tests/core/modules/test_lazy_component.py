"""延迟组件句柄测试"""

from unittest.mock import MagicMock

import pytest
from fastapi import APIRouter

from haalo.core.modules.lazy import LazyComponent, aresolve_component, resolve_component


class TestLazyComponent:
    def test_import_path_resolves_and_caches(self) -> None:
        lazy = LazyComponent("haalo.modules.connect_iq.routes:deals_router")
        assert lazy.is_resolved is False

        router = lazy.resolve()

        assert isinstance(router, APIRouter)
        assert lazy.is_resolved is True
        assert lazy.resolve() is router

    def test_factory_called_once(self) -> None:
        factory = MagicMock(return_value="view")
        lazy = LazyComponent(factory, name="factory")

        assert lazy.resolve() == "view"
        assert lazy.resolve() == "view"
        factory.assert_called_once()

    def test_reset_forces_reload(self) -> None:
        factory = MagicMock(side_effect=["v1", "v2"])
        lazy = LazyComponent(factory)

        assert lazy.resolve() == "v1"
        lazy.reset()
        assert lazy.is_resolved is False
        assert lazy.resolve() == "v2"

    def test_invalid_path_rejected(self) -> None:
        with pytest.raises(ValueError):
            LazyComponent("haalo.modules.connect_iq.routes")

    def test_missing_attribute_raises_on_resolve(self) -> None:
        lazy = LazyComponent("haalo.modules.connect_iq.routes:does_not_exist")

        with pytest.raises(AttributeError):
            lazy.resolve()
        assert lazy.is_resolved is False

    def test_repr_shows_state(self) -> None:
        lazy = LazyComponent(lambda: 1, name="one")
        assert "pending" in repr(lazy)
        lazy.resolve()
        assert "resolved" in repr(lazy)

    @pytest.mark.asyncio
    async def test_aresolve(self) -> None:
        lazy = LazyComponent("haalo.modules.case_management.routes:overview")

        view = await lazy.aresolve()

        assert callable(view)
        assert lazy.is_resolved is True


def test_resolve_component_passes_through_plain_objects() -> None:
    router = APIRouter()

    assert resolve_component(router) is router
    assert resolve_component(LazyComponent(lambda: router)) is router


@pytest.mark.asyncio
async def test_aresolve_component() -> None:
    def view():
        return {}

    assert await aresolve_component(view) is view
    assert await aresolve_component(LazyComponent(lambda: view)) is view
