# -*- coding: utf-8 -*-
"""
个股历史组件
出现次数统计 + Tushare 均线图
"""
from typing import List

import pandas as pd
import streamlit as st

from fupan.data.collectors import TushareError, tushare_collector
from fupan.signals import SignalRecord
from fupan.signals.stats import stock_history
from fupan.visualization.charts import plot_daily_chart, plot_ma20_candles

MA20_STATUS_TEXT = {'above': "✅ 站上MA20", 'touched': "⚠️ 触及MA20", 'below': "❌ 未达MA20"}


def render_stocks_tab(records: List[SignalRecord], days: int):
    """渲染近N天个股历史"""
    st.subheader(f"📈 近{days}天个股")

    history = stock_history(records)
    if not history:
        st.info("暂无个股数据")
        return

    df = pd.DataFrame([
        {
            '代码': h.code,
            '名称': h.name,
            '板块': "、".join(h.sectors),
            '出现次数': h.appearances,
            '日期': "、".join(h.dates),
            '平均换手%': h.avg_turnover,
            '平均分': h.avg_score,
            '最高分': h.max_score,
        }
        for h in history
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)

    options = {f"{h.code} {h.name}": h.code for h in history if h.code}
    if not options:
        return

    label = st.selectbox("查看均线", list(options.keys()))
    if st.button("📊 获取行情"):
        _render_ma_charts(options[label], label)


def _render_ma_charts(code: str, label: str):
    try:
        with st.spinner("正在获取行情..."):
            ma20 = tushare_collector.get_ma20_with_ohlc(code)
            daily = tushare_collector.get_daily_chart_data(code)
    except TushareError as e:
        st.error(f"行情获取失败: {e}")
        return

    if ma20:
        st.markdown(f"**{MA20_STATUS_TEXT[ma20['status']]}** · MA20 {ma20['ma20']:.2f} · "
                    f"收盘 {ma20['latest_close']:.2f} ({ma20['latest_trade_date']})")
        st.plotly_chart(plot_ma20_candles(ma20, f"{label} 近30日K线"), use_container_width=True)
    else:
        st.warning("交易日不足20天，无法计算MA20")

    if daily:
        st.plotly_chart(plot_daily_chart(daily, label), use_container_width=True)
