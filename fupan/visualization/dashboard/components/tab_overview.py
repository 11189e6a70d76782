# -*- coding: utf-8 -*-
"""
每日概览组件
"""
from typing import List

import streamlit as st

from fupan.signals import SignalRecord
from fupan.signals.stats import daily_summary, export_csv, export_json, records_frame
from fupan.visualization.charts import plot_score_distribution


def render_overview_tab(records: List[SignalRecord], day: str):
    """
    渲染每日概览Tab

    Args:
        records: 当日记录
        day: 日期 YYYY-MM-DD
    """
    st.subheader(f"📅 {day} 复盘概览")

    summary = daily_summary(records, day)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("信号总数", summary.total_count)
    col2.metric("🟢 优先 (≥75)", summary.high_priority)
    col3.metric("🔵 备选 (50-74)", summary.alternative)
    col4.metric("🔴 淘汰 (<50)", summary.eliminated)

    if not summary.records:
        st.info("当日暂无记录")
        return

    fig = plot_score_distribution(summary.records)
    if fig is not None:
        st.plotly_chart(fig, use_container_width=True)

    st.dataframe(records_frame(summary.records), use_container_width=True, hide_index=True)

    c1, c2 = st.columns(2)
    c1.download_button("⬇️ 导出CSV", export_csv(summary.records), file_name=f"signals_{day}.csv", mime="text/csv")
    c2.download_button("⬇️ 导出JSON", export_json(summary.records), file_name=f"signals_{day}.json",
                       mime="application/json")
