# -*- coding: utf-8 -*-
"""
图表模块测试
"""

import plotly.graph_objects as go

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fupan.signals import SignalRecord
from fupan.visualization.charts import (
    plot_daily_chart, plot_ma20_candles, plot_score_distribution, score_color
)


def make_record(code, score):
    return SignalRecord(
        date="2024-06-03", code=code, name=f"股票{code}", sector=["a"], sector_pattern=None,
        turnover=None, chg=None, amount=None, debt_ratio=None, score=score, reason=["r"]
    )


class TestCharts:
    """图表构建"""

    def test_score_color_buckets(self):
        assert score_color(80) != score_color(60) != score_color(10)
        assert score_color(75) == score_color(100)
        assert score_color(50) == score_color(74)

    def test_score_distribution_top_n(self):
        records = [make_record(str(i).zfill(6), i * 3) for i in range(20)]
        fig = plot_score_distribution(records, top_n=15)

        assert isinstance(fig, go.Figure)
        bar = fig.data[0]
        assert len(bar.x) == 15
        # 最高分在最上方 (最后绘制)
        assert bar.x[-1] == 57
        assert bar.y[-1] == "股票000019"

    def test_score_distribution_empty(self):
        assert plot_score_distribution([]) is None

    def test_ma20_candles(self):
        data = {
            'ma20': 10.5,
            'ohlc': [{'date': "2024-06-03", 'open': 10, 'high': 11, 'low': 9.5, 'close': 10.8}],
        }
        fig = plot_ma20_candles(data, "测试")
        assert fig.data[0].type == "candlestick"
        assert fig.layout.title.text == "测试"
        assert any(shape.y0 == 10.5 for shape in fig.layout.shapes)

    def test_daily_chart(self):
        data = {
            'series': [{'date': "2024-06-03", 'close': 10.0, 'ma5': None, 'ma30': None}],
            'near': True,
        }
        fig = plot_daily_chart(data, "600519")
        assert [t.name for t in fig.data] == ["收盘价", "MA5", "MA30"]
        assert "接近" in fig.layout.title.text
