# -*- coding: utf-8 -*-
"""
组件包初始化
"""
from .tab_input import render_input_tab
from .tab_overview import render_overview_tab
from .tab_sectors import render_sectors_tab
from .tab_stocks import render_stocks_tab
from .tab_review import render_review_tab

__all__ = [
    'render_input_tab',
    'render_overview_tab',
    'render_sectors_tab',
    'render_stocks_tab',
    'render_review_tab'
]
