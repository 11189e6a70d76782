# -*- coding: utf-8 -*-
"""Collectors module"""
from .tushare_collector import TushareCollector, TushareError, tushare_collector

__all__ = ['TushareCollector', 'TushareError', 'tushare_collector']
