# -*- coding: utf-8 -*-
"""
复盘信号日志
A股日内复盘信号记录、评分与AI复盘建议
"""

__version__ = "1.0.0"
