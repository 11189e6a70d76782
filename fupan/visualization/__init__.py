# -*- coding: utf-8 -*-
"""Visualization module"""
from .charts import plot_score_distribution, plot_ma20_candles, plot_daily_chart, score_color

__all__ = ['plot_score_distribution', 'plot_ma20_candles', 'plot_daily_chart', 'score_color']
