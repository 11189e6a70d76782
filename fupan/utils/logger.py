# -*- coding: utf-8 -*-
"""
复盘信号日志 - Logger Configuration
日志配置模块
"""

import os
import sys
from loguru import logger

from fupan.config.settings import settings

# 移除默认处理器
logger.remove()


def setup_logger(
    level: str = settings.log.level,
    log_dir: str = settings.log.log_dir,
    rotation: str = settings.log.rotation,
    retention: str = settings.log.retention
):
    """
    配置日志系统

    Args:
        level: 文件日志级别
        log_dir: 日志目录
        rotation: 日志轮转大小
        retention: 日志保留时间
    """
    logger.remove()

    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    # 控制台日志格式 - 简洁版
    console_format = "<level>{level: <5}</level> | {message}"

    # 文件日志格式 - 详细版
    file_format = settings.log.format

    # 控制台只显示WARNING及以上，可通过环境变量调整
    console_level = os.environ.get('LOG_LEVEL', 'WARNING')
    logger.add(
        sys.stdout,
        format=console_format,
        level=console_level,
        colorize=True
    )

    logger.add(
        os.path.join(log_dir, "fupan_{time:YYYY-MM-DD}.log"),
        format=file_format,
        level=level,
        rotation=rotation,
        retention=retention,
        encoding="utf-8"
    )

    logger.add(
        os.path.join(log_dir, "error_{time:YYYY-MM-DD}.log"),
        format=file_format,
        level="ERROR",
        rotation=rotation,
        retention=retention,
        encoding="utf-8"
    )
    return logger


def get_logger(name: str = None):
    """
    获取日志实例

    Args:
        name: 模块名称

    Returns:
        logger实例
    """
    if name:
        return logger.bind(module_name=name)
    return logger


# 默认初始化
setup_logger()
