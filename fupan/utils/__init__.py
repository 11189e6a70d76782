# -*- coding: utf-8 -*-
"""
Utils module
"""
from .logger import logger, setup_logger, get_logger
from .helpers import (
    format_date,
    parse_date,
    today_str,
    to_ts_date,
    from_ts_date,
)
from .stock_utils import StockBoard, get_stock_board, to_ts_code, is_limit_up

__all__ = [
    'logger',
    'setup_logger',
    'get_logger',
    'format_date',
    'parse_date',
    'today_str',
    'to_ts_date',
    'from_ts_date',
    'StockBoard',
    'get_stock_board',
    'to_ts_code',
    'is_limit_up'
]
