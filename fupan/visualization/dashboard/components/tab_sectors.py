# -*- coding: utf-8 -*-
"""
板块统计组件
"""
from typing import List

import pandas as pd
import streamlit as st

from fupan.signals import SignalRecord
from fupan.signals.stats import sector_stats


def render_sectors_tab(records: List[SignalRecord], days: int):
    """渲染近N天板块统计"""
    st.subheader(f"🧩 近{days}天板块统计")

    stats = sector_stats(records)
    if not stats:
        st.info("暂无板块数据")
        return

    df = pd.DataFrame([
        {
            '板块': s.sector,
            '出现天数': s.count,
            '平均分': s.avg_score,
            '高分个股': "、".join(f"{r.name}({r.score})" for r in s.top_records),
        }
        for s in stats
    ])
    st.bar_chart(df.set_index('板块')['出现天数'])
    st.dataframe(df, use_container_width=True, hide_index=True)
