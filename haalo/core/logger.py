"""
日志系统

基于 loguru，统一接管标准库 logging（uvicorn / starlette）的输出
"""

from __future__ import annotations

import logging
import os
import sys

from loguru import logger

from haalo.config import config

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """把标准库 logging 记录转发给 loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # 跳过 logging 模块自身的栈帧，让 loguru 显示真实调用位置
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", log_dir: str = "") -> None:
    """
    配置 loguru

    Args:
        level: 最低日志级别
        log_dir: 文件日志目录，为空时不写文件
    """
    level = level.split()[0].upper() if level else "INFO"

    # 移除默认 handler
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(
            os.path.join(log_dir, "haalo_{time}.log"),
            rotation="10 MB",
            retention="1 week",
            level="DEBUG",
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.error", "starlette"):
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False


setup_logging(config.log_level, config.log_dir)

__all__ = ["logger", "setup_logging"]
