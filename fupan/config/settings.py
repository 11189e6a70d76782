# -*- coding: utf-8 -*-
"""
复盘信号日志 - Configuration Settings
系统配置文件 (使用环境变量)
"""

import os
from dataclasses import dataclass, field
from typing import Tuple

from dotenv import load_dotenv

# 加载 .env 文件
load_dotenv()


@dataclass
class DatabaseConfig:
    """数据库配置"""
    url: str = os.getenv("DATABASE_URL", "")
    host: str = os.getenv("DB_HOST", "127.0.0.1")
    port: int = int(os.getenv("DB_PORT", "3306"))
    username: str = os.getenv("DB_USER", "root")
    password: str = os.getenv("DB_PASSWORD", "")
    database: str = os.getenv("DB_NAME", "a_share_db")
    charset: str = "utf8mb4"

    @property
    def connection_string(self) -> str:
        """获取SQLAlchemy连接字符串, DATABASE_URL 优先"""
        if self.url:
            return self.url
        return f"mysql+pymysql://{self.username}:{self.password}@{self.host}:{self.port}/{self.database}?charset={self.charset}"


@dataclass
class TushareConfig:
    """Tushare Pro API配置"""
    token: str = os.getenv("TUSHARE_TOKEN", "")
    base_url: str = os.getenv("TUSHARE_API_URL", "http://api.tushare.pro")
    timeout: int = 30
    max_retries: int = 3


@dataclass
class GroqConfig:
    """Groq AI配置"""
    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
    # 复盘智囊需要识别板块分时截图
    vision_model: str = os.getenv("GROQ_VISION_MODEL", "meta-llama/llama-4-scout-17b-16e-instruct")
    max_tokens: int = 1024


@dataclass
class LogConfig:
    """日志配置"""
    level: str = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
    log_dir: str = os.getenv("LOG_DIR", "logs")
    rotation: str = "10 MB"
    retention: str = "30 days"


@dataclass
class ScoreConfig:
    """信号评分配置"""
    # 板块分时形态加分
    rise_from_dip_bonus: int = 30      # 水下拉水上
    triangle_bonus: int = 20           # 波动三角收窄
    # 换手率档位 (阈值%, 加分)，从高到低互斥
    turnover_tiers: Tuple[Tuple[float, int], ...] = ((8.0, 30), (5.0, 20), (3.0, 10))
    min_score: int = 0
    max_score: int = 100
    # 每日概览分档
    high_priority: int = 75            # >= 75 优先
    alternative: int = 50              # 50-74 备选, < 50 淘汰
    # 无板块时的占位板块
    default_sector: str = "未分类"
    # 近N日视图
    window_days: int = 30


class Settings:
    """系统设置"""

    # 配置实例
    database = DatabaseConfig()
    tushare = TushareConfig()
    groq = GroqConfig()
    log = LogConfig()
    score = ScoreConfig()

    # 数据库字段长度限制
    COLUMN_LIMITS = {
        'code': 16,
        'name': 64,
        'sector': 255,
        'sector_pattern': 32,
        'screenshot_sector': 64,
    }

    # 5日线与30日线"接近"的阈值 (相对差异 < 2%)
    MA_NEAR_THRESHOLD = 0.02


# 创建全局配置实例
settings = Settings()
