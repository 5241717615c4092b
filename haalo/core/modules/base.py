"""
模块基础定义

包含模块元数据、路由、菜单和生命周期钩子的数据结构
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

# 组件引用：LazyComponent / APIRouter / 可调用对象，由 lazy.resolve_component 统一解析
ComponentRef = Any

InitializeHook = Callable[[Dict[str, Any]], Union[Awaitable[None], None]]
DestroyHook = Callable[[], Union[Awaitable[None], None]]


class ModuleCategory(str, Enum):
    """模块分类"""

    CORE = "core"
    HR = "hr"
    PAYROLL = "payroll"
    FINANCE = "finance"
    COMPLIANCE = "compliance"
    CRM = "crm"
    BENEFITS = "benefits"
    TIME = "time"
    REPORTING = "reporting"
    INTEGRATION = "integration"
    TRAINING = "training"


class ModuleLifecycleStatus(str, Enum):
    """模块对当前租户的商业状态（决定目录中的徽标和操作按钮）"""

    ACTIVE = "active"
    LOCKED = "locked"
    NOT_INSTALLED = "not_installed"


@dataclass
class ModuleMetadata:
    """
    模块元数据 - 纯数据描述，无重依赖
    """

    name: str  # 显示名称: "ConnectIQ CRM"
    description: str
    category: ModuleCategory
    version: str = "1.0.0"
    icon: Optional[str] = None  # 图标名（前端图标库）

    # 目录展示标记
    is_premium: bool = False
    is_beta: bool = False
    is_coming_soon: bool = False
    requires_setup: bool = False

    status: ModuleLifecycleStatus = ModuleLifecycleStatus.ACTIVE
    status_color: Optional[str] = None  # 覆盖默认徽标颜色

    dependencies: List[str] = field(default_factory=list)  # 依赖的其他模块 ID


@dataclass
class RouteDefinition:
    """
    模块路由声明

    path 为完整路径（如 /admin/connectiq/deals），由动态路由按前缀挂载
    """

    path: str
    component: ComponentRef
    exact: bool = False
    protected: bool = True
    roles: List[str] = field(default_factory=list)


@dataclass
class MenuItem:
    """导航菜单节点，children 归父节点所有"""

    id: str
    label: str
    icon: Optional[str] = None
    path: Optional[str] = None
    children: List["MenuItem"] = field(default_factory=list)
    required_roles: List[str] = field(default_factory=list)
    permissions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "icon": self.icon,
            "path": self.path,
            "required_roles": list(self.required_roles),
            "permissions": list(self.permissions),
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class ModuleDefinition:
    """
    完整模块定义

    注册后视为不可变；钩子函数内部延迟导入重依赖
    """

    id: str  # 进程内唯一标识: connect_iq, payroll_batch
    metadata: ModuleMetadata
    routes: List[RouteDefinition] = field(default_factory=list)
    menu: List[MenuItem] = field(default_factory=list)
    configuration: Dict[str, Any] = field(default_factory=dict)

    # 生命周期钩子
    initialize: Optional[InitializeHook] = None
    destroy: Optional[DestroyHook] = None
    get_component: Optional[Callable[[], ComponentRef]] = None


@dataclass
class ModuleState:
    """
    模块运行状态快照

    用于 API 返回，供前端使用
    """

    id: str
    registered: bool
    loading: bool
    loaded: bool
    access: bool
    missing_dependencies: List[str] = field(default_factory=list)

    @property
    def visible(self) -> bool:
        """路由和菜单是否参与聚合：已加载且有访问权限"""
        return self.loaded and self.access
