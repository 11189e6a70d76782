# -*- coding: utf-8 -*-
"""Core module"""
from .api import app, run_api

__all__ = ['app', 'run_api']
