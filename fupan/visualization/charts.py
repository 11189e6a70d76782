# -*- coding: utf-8 -*-
"""
复盘图表模块
信号强度分布、20日均线K线、收盘价/MA5/MA30走势
"""

from typing import Any, Dict, List, Optional

import plotly.graph_objects as go

from fupan.config.settings import settings
from fupan.signals.types import SignalRecord

TOP_N = 15


def score_color(score: int) -> str:
    """高优先绿色，备选蓝色，淘汰红色"""
    if score >= settings.score.high_priority:
        return "#1f9d55"
    if score >= settings.score.alternative:
        return "#2b6cb0"
    return "#e02424"


def plot_score_distribution(records: List[SignalRecord], top_n: int = TOP_N) -> Optional[go.Figure]:
    """
    信号强度分布 (评分最高的前N只)

    Args:
        records: 信号记录
        top_n: 显示数量

    Returns:
        横向柱状图，无记录时返回None
    """
    if not records:
        return None

    top = sorted(records, key=lambda r: r.score, reverse=True)[:top_n]
    # 横向柱状图自下而上绘制，倒序让最高分在顶部
    top = list(reversed(top))

    fig = go.Figure(go.Bar(
        x=[r.score for r in top],
        y=[r.name or r.code for r in top],
        orientation='h',
        marker_color=[score_color(r.score) for r in top],
        text=[r.score for r in top],
        textposition='inside',
        customdata=[r.code for r in top],
        hovertemplate="%{y} (%{customdata})<br>评分 %{x}<extra></extra>"
    ))
    fig.update_layout(
        title=f"信号强度分布 (Top {top_n})",
        xaxis_range=[settings.score.min_score, settings.score.max_score],
        height=max(300, 24 * len(top) + 80),
        template='plotly_dark',
        margin=dict(l=10, r=10, t=40, b=10)
    )
    return fig


def plot_ma20_candles(data: Dict[str, Any], title: str = "") -> go.Figure:
    """
    近30日K线叠加20日均线

    Args:
        data: TushareCollector.get_ma20_with_ohlc 的返回值
        title: 图表标题
    """
    bars = data.get('ohlc') or []
    dates = [b['date'] for b in bars]

    fig = go.Figure(go.Candlestick(
        x=dates,
        open=[b['open'] for b in bars],
        high=[b['high'] for b in bars],
        low=[b['low'] for b in bars],
        close=[b['close'] for b in bars],
        name='K线',
        increasing_line_color='red',
        decreasing_line_color='green'
    ))

    if data.get('ma20') is not None:
        fig.add_hline(
            y=data['ma20'],
            line_dash="dash",
            line_color="blue",
            annotation_text=f"MA20 {data['ma20']:.2f}"
        )

    fig.update_layout(
        title=title or "20日均线",
        xaxis_rangeslider_visible=False,
        template='plotly_dark',
        height=400
    )
    return fig


def plot_daily_chart(data: Dict[str, Any], title: str = "") -> go.Figure:
    """
    收盘价与MA5/MA30走势

    Args:
        data: TushareCollector.get_daily_chart_data 的返回值
        title: 图表标题
    """
    series = data.get('series') or []
    dates = [p['date'] for p in series]

    fig = go.Figure()
    fig.add_trace(go.Scatter(x=dates, y=[p['close'] for p in series], mode='lines', name='收盘价',
                             line=dict(color='white', width=1)))
    fig.add_trace(go.Scatter(x=dates, y=[p['ma5'] for p in series], mode='lines', name='MA5',
                             line=dict(color='yellow', width=1)))
    fig.add_trace(go.Scatter(x=dates, y=[p['ma30'] for p in series], mode='lines', name='MA30',
                             line=dict(color='purple', width=1)))

    suffix = " · MA5/MA30 接近" if data.get('near') else ""
    fig.update_layout(
        title=(title or "收盘价 / MA5 / MA30") + suffix,
        template='plotly_dark',
        height=350
    )
    return fig
