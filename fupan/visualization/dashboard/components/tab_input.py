# -*- coding: utf-8 -*-
"""
信号录入组件
粘贴解析 / 手动录入 / 板块分时截图上传
"""
import base64

import streamlit as st

from fupan.data.storage import DatabaseManager, SignalValidationError
from fupan.signals import SectorPattern, normalize_record, parse_signal_text
from fupan.signals.stats import records_frame

PATTERN_OPTIONS = ["", SectorPattern.RISE_FROM_DIP.value, SectorPattern.TRIANGLE_NARROWING.value]


def render_input_tab(db: DatabaseManager, day: str):
    """
    渲染信号录入Tab

    Args:
        db: 数据库管理器
        day: 当前复盘日期 YYYY-MM-DD
    """
    st.subheader("📝 信号录入")

    col1, col2 = st.columns([3, 2])
    with col1:
        _render_paste_input(day)
    with col2:
        _render_manual_input(day)

    _render_pending(db)

    st.divider()
    _render_screenshot_upload(db, day)


def _render_paste_input(day: str):
    text = st.text_area(
        "粘贴数据 (JSON数组 / 表格 / 字段：值 文本块)",
        height=200,
        placeholder="代码,名称,板块,换手率\n600519,贵州茅台,白酒,3.2%"
    )
    if st.button("🔍 解析", use_container_width=True):
        records = parse_signal_text(text, day)
        if records:
            st.session_state['pending'] = st.session_state.get('pending', []) + records
            st.success(f"解析出 {len(records)} 条记录")
        else:
            st.warning("未识别到有效记录，请检查格式")


def _render_manual_input(day: str):
    with st.form("manual_input", clear_on_submit=True):
        code = st.text_input("代码")
        name = st.text_input("名称")
        sector = st.text_input("板块 (多个用、分隔)")
        pattern = st.selectbox("板块分时", PATTERN_OPTIONS, format_func=lambda x: x or "无")
        c1, c2 = st.columns(2)
        turnover = c1.text_input("换手率%")
        chg = c2.text_input("涨跌幅%")
        amount = c1.text_input("市值(亿)")
        debt_ratio = c2.text_input("资产负债率%")

        if st.form_submit_button("➕ 添加"):
            record = normalize_record({
                'code': code, 'name': name, 'sector': sector, 'sector_pattern': pattern,
                'turnover': turnover, 'chg': chg, 'amount': amount, 'debt_ratio': debt_ratio,
            }, day)
            if record.code and record.name:
                st.session_state['pending'] = st.session_state.get('pending', []) + [record]
            else:
                st.error("代码和名称不能为空")


def _render_pending(db: DatabaseManager):
    pending = st.session_state.get('pending', [])
    if not pending:
        return

    st.markdown(f"**待保存 {len(pending)} 条**")
    st.dataframe(records_frame(pending), use_container_width=True, hide_index=True)

    col1, col2 = st.columns(2)
    if col1.button("💾 保存", type="primary", use_container_width=True):
        try:
            count = db.save_signals(pending)
            st.session_state['pending'] = []
            st.success(f"已保存 {count} 条记录")
        except SignalValidationError as e:
            st.error(str(e))
    if col2.button("🗑️ 清空待保存", use_container_width=True):
        st.session_state['pending'] = []


def _render_screenshot_upload(db: DatabaseManager, day: str):
    st.markdown("**📷 板块分时截图**")
    sector = st.text_input("板块名称", key="shot_sector")
    uploaded = st.file_uploader("上传截图", type=["png", "jpg", "jpeg", "webp"])

    if uploaded is not None and sector and st.button("上传截图"):
        encoded = base64.b64encode(uploaded.getvalue()).decode("ascii")
        data_url = f"data:{uploaded.type};base64,{encoded}"
        try:
            db.upsert_screenshot(day, sector.strip(), data_url)
            st.success(f"已保存 {day} {sector} 截图")
        except SignalValidationError as e:
            st.error(str(e))
