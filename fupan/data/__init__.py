# -*- coding: utf-8 -*-
"""Data module"""
from .models import Base, SignalRecordRow, SectorScreenshotRow
from .collectors import TushareCollector, TushareError, tushare_collector
from .storage import DatabaseManager, SignalValidationError, get_db_manager

__all__ = [
    'Base', 'SignalRecordRow', 'SectorScreenshotRow',
    'TushareCollector', 'TushareError', 'tushare_collector',
    'DatabaseManager', 'SignalValidationError', 'get_db_manager'
]
