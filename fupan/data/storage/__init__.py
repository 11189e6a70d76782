# -*- coding: utf-8 -*-
"""Storage module"""
from .db_manager import DatabaseManager, SignalValidationError, get_db_manager

__all__ = ['DatabaseManager', 'SignalValidationError', 'get_db_manager']
