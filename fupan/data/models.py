# -*- coding: utf-8 -*-
"""
复盘信号日志 - Data Models
SQLAlchemy数据模型定义
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, Date, Text, Index, UniqueConstraint
from sqlalchemy.dialects.mysql import LONGTEXT
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class SignalRecordRow(Base):
    """复盘信号记录表"""
    __tablename__ = 'signal_records'

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, comment='交易日期')
    code = Column(String(16), nullable=False, comment='股票代码')
    name = Column(String(64), nullable=False, comment='股票名称')
    sector = Column(String(255), nullable=False, comment='板块, 以、分隔')
    sector_pattern = Column(String(32), comment='板块分时形态')
    turnover = Column(Float, comment='换手率')
    chg = Column(Float, comment='涨跌幅')
    amount = Column(Float, comment='成交额')
    debt_ratio = Column(Float, comment='资产负债率')
    score = Column(Integer, nullable=False, comment='评分')
    reason = Column(Text, nullable=False, comment='评分原因 JSON数组')
    created_at = Column(DateTime, default=datetime.now)

    __table_args__ = (
        Index('idx_signal_date', 'date'),
        Index('idx_signal_code', 'code'),
        {'comment': '复盘信号记录表'}
    )


class SectorScreenshotRow(Base):
    """板块分时截图表"""
    __tablename__ = 'sector_screenshots'

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, comment='交易日期')
    sector = Column(String(64), nullable=False, comment='板块名称')
    image_data = Column(Text().with_variant(LONGTEXT(), 'mysql'), nullable=False, comment='截图 Data URL')
    created_at = Column(DateTime, default=datetime.now)

    __table_args__ = (
        Index('idx_screenshot_date', 'date'),
        UniqueConstraint('date', 'sector', name='uq_screenshot_date_sector'),
        {'comment': '板块分时截图表'}
    )
