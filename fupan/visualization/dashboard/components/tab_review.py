# -*- coding: utf-8 -*-
"""
复盘智囊组件
"""
from typing import List

import streamlit as st

from fupan.signals import SectorScreenshot, SignalRecord
from fupan.strategy import AIServiceError, get_ai_analyzer


def render_review_tab(records: List[SignalRecord], screenshots: List[SectorScreenshot], day: str):
    """
    渲染AI复盘建议Tab

    Args:
        records: 当日记录
        screenshots: 当日板块分时截图
        day: 日期
    """
    st.subheader("🤖 复盘智囊")

    analyzer = get_ai_analyzer()
    if not analyzer.available:
        st.warning("⚠️ AI服务未配置，请在 .env 中设置 GROQ_API_KEY")
        return

    st.caption(f"个股 {len(records)} 只 · 板块截图 {len(screenshots)} 张")
    if screenshots:
        cols = st.columns(min(len(screenshots), 4))
        for i, shot in enumerate(screenshots):
            cols[i % len(cols)].image(shot.image_data_url, caption=shot.sector)

    if st.button("✨ 生成次日操作建议", type="primary"):
        try:
            with st.spinner("AI分析中..."):
                content = analyzer.review_suggestions(day, records, screenshots)
            st.session_state['review'] = content
        except AIServiceError as e:
            st.error(str(e))

    if st.session_state.get('review'):
        st.markdown(st.session_state['review'])

    st.divider()
    question = st.text_input("💬 追问")
    if question and st.button("发送"):
        try:
            answer = analyzer.chat([{'role': "user", 'content': question}])
            st.markdown(answer)
        except AIServiceError as e:
            st.error(str(e))
