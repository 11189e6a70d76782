# -*- coding: utf-8 -*-
"""
信号记录数据结构
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional


class SectorPattern(str, Enum):
    """板块分时形态"""
    RISE_FROM_DIP = "水下拉水上"
    TRIANGLE_NARROWING = "波动三角收窄"

    @classmethod
    def from_value(cls, value: Any) -> Optional["SectorPattern"]:
        """严格匹配两种形态，其他值一律视为缺失"""
        if isinstance(value, cls):
            return value
        text = str(value).strip() if value is not None else ""
        for member in cls:
            if member.value == text:
                return member
        return None


@dataclass
class SignalRecord:
    """单只股票在某个交易日的复盘信号"""
    date: str                                   # YYYY-MM-DD
    code: str
    name: str
    sector: List[str]
    sector_pattern: Optional[SectorPattern]
    turnover: Optional[float]
    chg: Optional[float]                        # 涨跌幅 %
    amount: Optional[float]                     # 成交额/市值 (亿)
    debt_ratio: Optional[float]                 # 资产负债率 %
    score: int
    reason: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['sector_pattern'] = self.sector_pattern.value if self.sector_pattern else None
        return data


@dataclass
class DailySummary:
    """单日概览"""
    date: str
    total_count: int
    high_priority: int      # score >= 75
    alternative: int        # 50 <= score < 75
    eliminated: int         # score < 50
    records: List[SignalRecord]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'totalCount': self.total_count,
            'highPriority': self.high_priority,
            'alternative': self.alternative,
            'eliminated': self.eliminated,
            'records': [r.to_dict() for r in self.records],
        }


@dataclass
class SectorStat:
    """板块统计"""
    sector: str
    count: int              # 出现的日期数，不是个股数
    top_records: List[SignalRecord]
    avg_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sector': self.sector,
            'count': self.count,
            'topRecords': [r.to_dict() for r in self.top_records],
            'avgScore': self.avg_score,
        }


@dataclass
class StockHistory:
    """个股出现历史"""
    code: str
    name: str
    sectors: List[str]
    appearances: int
    dates: List[str]
    avg_turnover: Optional[float]
    avg_score: int
    max_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code,
            'name': self.name,
            'sectors': self.sectors,
            'appearances': self.appearances,
            'dates': self.dates,
            'avgTurnover': self.avg_turnover,
            'avgScore': self.avg_score,
            'maxScore': self.max_score,
        }


@dataclass
class SectorScreenshot:
    """某日某板块的分时截图 (Data URL)"""
    date: str
    sector: str
    image_data_url: str

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date, 'sector': self.sector, 'imageDataUrl': self.image_data_url}
