# -*- coding: utf-8 -*-
"""
A股股票代码工具
根据股票代码判断板块、Tushare代码和涨停幅度
"""

import re
from enum import Enum
from typing import Tuple


class StockBoard(Enum):
    """A股板块类型"""
    MAIN_SH = "沪市主板"      # 60xxxx
    MAIN_SZ = "深市主板"      # 00xxxx
    CHINEXT = "创业板"        # 30xxxx (20%涨跌幅)
    STAR = "科创板"           # 688xxx (20%涨跌幅)
    BSE = "北交所"            # 8xxxxx, 4xxxxx (30%涨跌幅)
    UNKNOWN = "未知"


def clean_code(code: str) -> str:
    """去掉非数字字符并补足6位"""
    digits = re.sub(r"\D", "", str(code or ""))
    if not digits:
        return ""
    return digits.zfill(6)


def get_stock_board(code: str) -> StockBoard:
    """
    根据股票代码判断板块

    Args:
        code: 股票代码 (如 "000001", "300750", "688001", "600519.SH")

    Returns:
        StockBoard: 板块类型
    """
    code = clean_code(code)

    if len(code) != 6:
        return StockBoard.UNKNOWN

    if code.startswith("68"):
        return StockBoard.STAR

    if code.startswith("30"):
        return StockBoard.CHINEXT

    if code.startswith("8") or code.startswith("4"):
        return StockBoard.BSE

    if code.startswith("60"):
        return StockBoard.MAIN_SH

    if code.startswith("00"):
        return StockBoard.MAIN_SZ

    return StockBoard.UNKNOWN


def to_ts_code(code: str) -> str:
    """
    6位代码转换为Tushare格式 (如 000001.SZ)

    60/68开头为上交所，00/30开头为深交所，43/83/87开头为北交所，
    其余默认深交所。无法识别时返回空字符串。
    """
    code = clean_code(code)
    if len(code) != 6:
        return ""

    if code.startswith(("60", "68")):
        return f"{code}.SH"
    if code.startswith(("00", "30")):
        return f"{code}.SZ"
    if code.startswith(("43", "83", "87")):
        return f"{code}.BJ"
    return f"{code}.SZ"


def get_limit_pct(code: str, name: str = "") -> Tuple[float, float]:
    """
    获取股票的涨跌停幅度

    Args:
        code: 股票代码
        name: 股票名称 (用于判断ST)

    Returns:
        (涨停幅度, 跌停幅度) 如 (0.10, -0.10)
    """
    is_st = "ST" in name.upper() if name else False

    if is_st:
        return (0.05, -0.05)

    board = get_stock_board(code)

    if board in (StockBoard.STAR, StockBoard.CHINEXT):
        return (0.20, -0.20)

    if board == StockBoard.BSE:
        return (0.30, -0.30)

    return (0.10, -0.10)


def is_limit_up(code: str, name: str, change_pct: float) -> bool:
    """
    判断是否涨停

    Args:
        code: 股票代码
        name: 股票名称
        change_pct: 涨跌幅 (如 9.98 表示涨9.98%)

    Returns:
        bool: 是否涨停
    """
    limit_up_pct, _ = get_limit_pct(code, name)
    # 涨幅 >= 涨停幅度 - 0.2% (容差)
    return change_pct >= (limit_up_pct * 100 - 0.2)
