# -*- coding: utf-8 -*-
"""
复盘信号日志 - Helper Functions
通用辅助函数
"""

from datetime import datetime, date, timedelta
from typing import Optional, Union


_DATE_FORMATS = ["%Y-%m-%d", "%Y%m%d", "%Y/%m/%d"]


def format_date(value: Union[str, date, datetime], fmt: str = "%Y-%m-%d") -> str:
    """
    格式化日期，无法识别的字符串原样返回

    Args:
        value: 日期对象或字符串
        fmt: 目标格式

    Returns:
        格式化后的日期字符串
    """
    if isinstance(value, str):
        text = value.strip()
        for parse_fmt in _DATE_FORMATS:
            try:
                value = datetime.strptime(text, parse_fmt)
                break
            except ValueError:
                continue
        else:
            return text

    if isinstance(value, (datetime, date)):
        return value.strftime(fmt)
    return str(value)


def parse_date(date_str: str) -> date:
    """
    解析日期字符串

    Args:
        date_str: 日期字符串 (YYYY-MM-DD / YYYYMMDD / YYYY/MM/DD)

    Returns:
        date对象

    Raises:
        ValueError: 无法解析
    """
    text = (date_str or "").strip()
    for fmt in _DATE_FORMATS + ["%Y-%m-%d %H:%M:%S"]:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"无法解析日期: {date_str}")


def today_str() -> str:
    """当天日期 YYYY-MM-DD"""
    return date.today().strftime("%Y-%m-%d")


def days_ago_str(days: int, today: Optional[date] = None) -> str:
    """N天前的日期 YYYY-MM-DD"""
    base = today or date.today()
    return (base - timedelta(days=days)).strftime("%Y-%m-%d")


def to_ts_date(value: Union[str, date]) -> str:
    """转换为Tushare日期格式 YYYYMMDD"""
    return format_date(value, "%Y%m%d")


def from_ts_date(value: str) -> str:
    """Tushare日期 YYYYMMDD → YYYY-MM-DD"""
    value = str(value)
    return f"{value[0:4]}-{value[4:6]}-{value[6:8]}"


def round2(value: float) -> float:
    """保留两位小数"""
    return round(float(value) * 100) / 100


def format_plain_number(value: float) -> str:
    """
    数字转文本，整数值不带小数部分 (8.0 → "8", 3.2 → "3.2")
    """
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))

