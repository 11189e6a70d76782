# -*- coding: utf-8 -*-
"""
复盘信号统计与导出
每日概览、板块统计、个股历史、CSV/JSON导出
"""

import json
import math
from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from fupan.config.settings import settings
from fupan.signals.types import DailySummary, SectorStat, SignalRecord, StockHistory
from fupan.utils.helpers import days_ago_str, today_str


EXPORT_COLUMNS = [
    "日期", "代码", "名称", "板块", "板块分时", "换手率%",
    "涨跌幅%", "成交额", "资产负债率%", "评分", "评分原因",
]


def _mean(values: List[float]) -> float:
    return sum(values) / len(values)


def _round(value: float) -> int:
    """四舍五入到整数"""
    return int(math.floor(value + 0.5))


def _by_score(records: List[SignalRecord]) -> List[SignalRecord]:
    return sorted(records, key=lambda r: r.score, reverse=True)


def filter_last_days(
    records: List[SignalRecord],
    days: int = settings.score.window_days,
    today: Optional[date] = None
) -> List[SignalRecord]:
    """近N天的记录 (含第N天)"""
    cutoff = days_ago_str(days, today)
    return [r for r in records if r.date >= cutoff]


def records_on_date(records: List[SignalRecord], day: str) -> List[SignalRecord]:
    """指定日期的记录"""
    return [r for r in records if r.date == day]


def daily_summary(records: List[SignalRecord], day: Optional[str] = None) -> DailySummary:
    """
    单日概览

    Args:
        records: 当日记录
        day: 日期，默认取第一条记录的日期或今天

    Returns:
        DailySummary，records按评分降序
    """
    cfg = settings.score
    day = day or (records[0].date if records else today_str())
    return DailySummary(
        date=day,
        total_count=len(records),
        high_priority=sum(1 for r in records if r.score >= cfg.high_priority),
        alternative=sum(1 for r in records if cfg.alternative <= r.score < cfg.high_priority),
        eliminated=sum(1 for r in records if r.score < cfg.alternative),
        records=_by_score(records),
    )


def sector_stats(records: List[SignalRecord]) -> List[SectorStat]:
    """
    板块统计

    count 为板块出现的日期数；按count降序。
    """
    grouped: Dict[str, Dict] = {}
    for record in records:
        for sector in record.sector:
            entry = grouped.setdefault(sector, {'dates': set(), 'records': []})
            entry['dates'].add(record.date)
            entry['records'].append(record)

    stats = [
        SectorStat(
            sector=sector,
            count=len(entry['dates']),
            top_records=_by_score(entry['records'])[:3],
            avg_score=_round(_mean([r.score for r in entry['records']])),
        )
        for sector, entry in grouped.items()
    ]
    return sorted(stats, key=lambda s: s.count, reverse=True)


def stock_history(records: List[SignalRecord]) -> List[StockHistory]:
    """
    个股出现历史，按代码(无代码时按名称)聚合

    按出现次数降序，次数相同按平均分降序。
    """
    grouped: Dict[str, List[SignalRecord]] = {}
    for record in records:
        key = record.code or record.name
        if not key:
            continue
        grouped.setdefault(key, []).append(record)

    history = []
    for recs in grouped.values():
        turnovers = [r.turnover for r in recs if r.turnover is not None]
        scores = [r.score for r in recs]
        sectors: List[str] = []
        for r in recs:
            for s in r.sector:
                if s not in sectors:
                    sectors.append(s)

        history.append(StockHistory(
            code=recs[0].code,
            name=recs[0].name,
            sectors=sectors,
            appearances=len(recs),
            dates=sorted({r.date for r in recs}),
            avg_turnover=round(_mean(turnovers), 2) if turnovers else None,
            avg_score=_round(_mean(scores)),
            max_score=max(scores),
        ))

    return sorted(history, key=lambda h: (h.appearances, h.avg_score), reverse=True)


def records_frame(records: List[SignalRecord]) -> pd.DataFrame:
    """记录转换为中文列名的DataFrame，用于展示和导出"""
    rows = [
        [
            r.date,
            r.code,
            r.name,
            "、".join(r.sector),
            r.sector_pattern.value if r.sector_pattern else "",
            r.turnover,
            r.chg,
            r.amount,
            r.debt_ratio,
            r.score,
            "; ".join(r.reason),
        ]
        for r in records
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_csv(records: List[SignalRecord]) -> str:
    """导出CSV文本"""
    return records_frame(records).to_csv(index=False, lineterminator="\n")


def export_json(records: List[SignalRecord]) -> str:
    """导出JSON文本"""
    return json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=2)
