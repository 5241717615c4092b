"""HaaLO 模块化管理平台"""

__version__ = "0.4.0"
