# -*- coding: utf-8 -*-
"""Strategy module"""
from .ai_analyzer import AIAnalyzer, AIServiceError, get_ai_analyzer

__all__ = ['AIAnalyzer', 'AIServiceError', 'get_ai_analyzer']
