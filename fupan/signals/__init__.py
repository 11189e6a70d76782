# -*- coding: utf-8 -*-
"""Signals module"""
from .types import SectorPattern, SignalRecord, DailySummary, SectorStat, StockHistory, SectorScreenshot
from .normalizers import normalize_code, parse_percent_or_number
from .scoring import score_signal, calculate_score
from .parser import parse_signal_text, normalize_record

__all__ = [
    'SectorPattern', 'SignalRecord', 'DailySummary', 'SectorStat', 'StockHistory', 'SectorScreenshot',
    'normalize_code', 'parse_percent_or_number',
    'score_signal', 'calculate_score',
    'parse_signal_text', 'normalize_record'
]
