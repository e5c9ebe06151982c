"""
日志模块

基于 loguru 配置 ModIndex 的日志输出。标准输出保留给命令行的 JSON 结果，
日志默认写入标准错误，可选再写入一个滚动日志文件。
"""

import os
import sys
from typing import Optional

from loguru import logger


DEFAULT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
DEBUG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} - {message}"
)


def resolve_level(level: Optional[str] = None) -> str:
    """
    确定日志级别

    优先使用显式传入的级别，其次是 MODINDEX_LOG_LEVEL，
    MODINDEX_DEBUG=1 时为 DEBUG，否则为 INFO。
    """
    if level:
        return level.upper()
    if os.environ.get("MODINDEX_LOG_LEVEL"):
        return os.environ["MODINDEX_LOG_LEVEL"].upper()
    return "DEBUG" if os.environ.get("MODINDEX_DEBUG", "0") == "1" else "INFO"


def setup_logger(
    level: Optional[str] = None,
    sink=sys.stderr,
    enqueue: bool = False,
    colorize: Optional[bool] = None,
    log_file: Optional[str] = None,
) -> str:
    """
    设置日志记录器

    Args:
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR)
        sink: 控制台输出目标
        enqueue: 是否启用队列（线程安全）
        colorize: 是否启用颜色，None 时由 loguru 根据终端判断
        log_file: 额外写入的日志文件路径

    Returns:
        生效的日志级别
    """
    level = resolve_level(level)
    debug = level == "DEBUG"

    logger.remove()
    logger.add(
        sink=sink,
        format=DEBUG_FORMAT if debug else DEFAULT_FORMAT,
        enqueue=enqueue,
        level=level,
        colorize=colorize,
        backtrace=debug,
        diagnose=debug,
    )

    if log_file:
        logger.add(
            log_file,
            format=DEBUG_FORMAT,
            level=level,
            rotation="10 MB",
            retention=3,
            encoding="utf-8",
            enqueue=enqueue,
        )

    logger.debug(f"日志级别: {level}")
    return level


__all__ = ["logger", "setup_logger", "resolve_level"]
