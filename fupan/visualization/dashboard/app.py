# -*- coding: utf-8 -*-
"""
Streamlit仪表盘
复盘信号录入、每日概览、板块/个股统计、AI复盘建议
"""

from datetime import date, timedelta
import sys
import os

import streamlit as st

# 添加项目路径
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))))

from fupan.config.settings import settings
from fupan.data.collectors import TushareError, tushare_collector
from fupan.data.storage import get_db_manager
from fupan.signals.stats import records_on_date
from fupan.utils.helpers import days_ago_str
from fupan.utils.logger import get_logger

from fupan.visualization.dashboard.components import (
    render_input_tab,
    render_overview_tab,
    render_sectors_tab,
    render_stocks_tab,
    render_review_tab,
)

logger = get_logger(__name__)

st.set_page_config(
    page_title="复盘信号日志",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def load_db():
    db = get_db_manager()
    db.init_tables()
    return db


@st.cache_data(ttl=3600)
def load_non_trading_days(start: date, end: date) -> list:
    """交易日历获取失败时不阻塞页面"""
    try:
        return tushare_collector.get_non_trading_days(start, end)
    except TushareError as e:
        logger.warning(f"获取交易日历失败: {e}")
        return []


def main():
    """主函数"""
    st.title("📒 复盘信号日志")

    db = load_db()
    day, days = render_sidebar()

    records = db.get_signals(date_from=days_ago_str(days))
    day_records = records_on_date(records, day)

    tab1, tab2, tab3, tab4, tab5 = st.tabs([
        "📝 信号录入", "📅 每日概览", "🧩 板块统计", "📈 个股历史", "🤖 复盘智囊"
    ])

    with tab1:
        render_input_tab(db, day)

    with tab2:
        render_overview_tab(day_records, day)

    with tab3:
        render_sectors_tab(records, days)

    with tab4:
        render_stocks_tab(records, days)

    with tab5:
        render_review_tab(day_records, db.get_screenshots(day), day)


def render_sidebar():
    """渲染侧边栏"""
    with st.sidebar:
        st.header("🗓️ 复盘日期")

        today = date.today()
        selected = st.date_input("日期", value=today, max_value=today)
        days = st.slider("统计窗口(天)", 7, 90, settings.score.window_days)

        non_trading = load_non_trading_days(today - timedelta(days=days), today)
        day = selected.strftime("%Y-%m-%d")
        if day in non_trading:
            st.warning("所选日期为非交易日")

    return day, days


if __name__ == "__main__":
    main()
