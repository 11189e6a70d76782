# -*- coding: utf-8 -*-
"""
Config module
"""
from .settings import settings, Settings, DatabaseConfig, TushareConfig, GroqConfig, ScoreConfig

__all__ = ['settings', 'Settings', 'DatabaseConfig', 'TushareConfig', 'GroqConfig', 'ScoreConfig']
