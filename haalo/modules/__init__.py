"""
功能模块

每个子包只声明 ModuleDefinition，路由组件通过 LazyComponent 延迟导入。
ALL_MODULES 为显式注册列表，由启动流程按顺序注册，导入本包不会产生注册副作用。
"""

from haalo.modules.case_management import case_management_module
from haalo.modules.connect_iq import connect_iq_module
from haalo.modules.direct_deposit import direct_deposit_module
from haalo.modules.payroll_batch import payroll_batch_module

ALL_MODULES = [
    connect_iq_module,
    payroll_batch_module,
    direct_deposit_module,
    case_management_module,
]

__all__ = [
    "ALL_MODULES",
    "case_management_module",
    "connect_iq_module",
    "direct_deposit_module",
    "payroll_batch_module",
]
