"""路由前缀匹配与角色判断"""

import pytest

from haalo.core.modules import RouteDefinition
from haalo.core.modules.routing import match_routes, relative_mount_path, roles_permit


def route(path: str, exact: bool = False) -> RouteDefinition:
    return RouteDefinition(path=path, component=lambda: None, exact=exact)


@pytest.mark.parametrize(
    "prefix,expected",
    [
        ("/admin", True),
        ("/admin/crm", True),
        ("/superadmin", False),
        ("/admin/crm/deals/1", False),
    ],
)
def test_match_routes_prefix(prefix: str, expected: bool) -> None:
    assert bool(match_routes([route("/admin/crm/deals")], prefix)) is expected


def test_match_routes_keeps_order() -> None:
    routes = [route("/p/b"), route("/q"), route("/p/a")]

    assert [r.path for r in match_routes(routes, "/p")] == ["/p/b", "/p/a"]


class TestRelativeMountPath:
    def test_nested_route_gets_wildcard(self) -> None:
        assert relative_mount_path(route("/admin/connectiq/deals"), "/admin/connectiq") == "deals/*"

    def test_exact_route_has_no_wildcard(self) -> None:
        assert relative_mount_path(route("/admin/connectiq/deals", exact=True), "/admin/connectiq") == "deals"

    def test_route_equal_to_prefix_is_empty(self) -> None:
        assert relative_mount_path(route("/payroll-iq"), "/payroll-iq") == ""

    def test_trailing_slashes_stripped(self) -> None:
        assert relative_mount_path(route("/payroll-iq/ach/"), "/payroll-iq/") == "ach/*"


class TestRolesPermit:
    def test_empty_required_allows_everyone(self) -> None:
        assert roles_permit([], []) is True

    def test_intersection_required(self) -> None:
        assert roles_permit(["admin"], ["employee", "admin"]) is True
        assert roles_permit(["admin"], ["employee"]) is False
        assert roles_permit(["admin"], []) is False
