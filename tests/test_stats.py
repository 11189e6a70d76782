# -*- coding: utf-8 -*-
"""
统计与导出测试
"""

import io
import json
from datetime import date

import pandas as pd
import pytest

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fupan.signals import SectorPattern, SignalRecord
from fupan.signals.stats import (
    EXPORT_COLUMNS, daily_summary, export_csv, export_json, filter_last_days,
    records_on_date, sector_stats, stock_history
)


def make_record(day, code, name, sector, score, turnover=None, pattern=None):
    return SignalRecord(
        date=day, code=code, name=name, sector=sector, sector_pattern=pattern,
        turnover=turnover, chg=None, amount=None, debt_ratio=None,
        score=score, reason=["r1", "r2"]
    )


class TestStats:
    """每日概览/板块/个股统计"""

    @pytest.fixture
    def records(self):
        return [
            make_record("2024-06-03", "600519", "贵州茅台", ["白酒"], 80, 8.0, SectorPattern.RISE_FROM_DIP),
            make_record("2024-06-03", "000858", "五粮液", ["白酒", "消费"], 55, 5.5),
            make_record("2024-06-03", "002371", "北方华创", ["半导体"], 20, 3.0),
            make_record("2024-06-04", "600519", "贵州茅台", ["白酒"], 60, 6.0),
            make_record("2024-06-04", "688981", "中芯国际", ["半导体"], 75),
        ]

    def test_daily_summary_buckets(self, records):
        summary = daily_summary(records_on_date(records, "2024-06-03"), "2024-06-03")
        assert summary.total_count == 3
        assert summary.high_priority == 1
        assert summary.alternative == 1
        assert summary.eliminated == 1
        assert [r.score for r in summary.records] == [80, 55, 20]

    def test_daily_summary_boundaries(self):
        recs = [make_record("2024-06-03", str(i), "x", ["a"], s) for i, s in enumerate([75, 74, 50, 49])]
        summary = daily_summary(recs)
        assert (summary.high_priority, summary.alternative, summary.eliminated) == (1, 2, 1)
        assert summary.date == "2024-06-03"

    def test_daily_summary_empty(self):
        summary = daily_summary([], "2024-06-03")
        assert summary.total_count == 0
        assert summary.to_dict()['records'] == []

    def test_sector_stats_counts_dates(self, records):
        stats = {s.sector: s for s in sector_stats(records)}

        assert stats["白酒"].count == 2
        assert stats["白酒"].avg_score == 65
        assert [r.score for r in stats["白酒"].top_records] == [80, 60, 55]
        assert stats["半导体"].count == 2
        assert stats["消费"].count == 1

    def test_sector_stats_sorted_by_count(self, records):
        counts = [s.count for s in sector_stats(records)]
        assert counts == sorted(counts, reverse=True)

    def test_sector_avg_rounds_half_up(self):
        recs = [make_record("2024-06-03", "1", "a", ["x"], 10), make_record("2024-06-03", "2", "b", ["x"], 11)]
        assert sector_stats(recs)[0].avg_score == 11

    def test_stock_history(self, records):
        history = stock_history(records)
        first = history[0]

        assert first.code == "600519"
        assert first.appearances == 2
        assert first.dates == ["2024-06-03", "2024-06-04"]
        assert first.avg_turnover == 7.0
        assert first.avg_score == 70
        assert first.max_score == 80

        chip = next(h for h in history if h.code == "688981")
        assert chip.avg_turnover is None

    def test_stock_history_sectors_first_seen_order(self):
        recs = [
            make_record("2024-06-03", "1", "a", ["B", "A"], 10),
            make_record("2024-06-04", "1", "a", ["A", "C"], 10),
        ]
        assert stock_history(recs)[0].sectors == ["B", "A", "C"]

    def test_filter_last_days(self, records):
        kept = filter_last_days(records, days=1, today=date(2024, 6, 5))
        assert {r.date for r in kept} == {"2024-06-04"}
        assert len(filter_last_days(records, days=30, today=date(2024, 6, 5))) == 5


class TestExport:
    """CSV/JSON导出"""

    @pytest.fixture
    def records(self):
        return [make_record("2024-06-03", "600519", "贵州茅台", ["白酒", "消费"], 40, 3.2, SectorPattern.RISE_FROM_DIP)]

    def test_export_csv(self, records):
        text = export_csv(records)
        df = pd.read_csv(io.StringIO(text), dtype=str)

        assert list(df.columns) == EXPORT_COLUMNS
        row = df.iloc[0]
        assert row["代码"] == "600519"
        assert row["板块"] == "白酒、消费"
        assert row["板块分时"] == "水下拉水上"
        assert row["评分原因"] == "r1; r2"

    def test_export_csv_empty(self):
        assert export_csv([]).strip() == ",".join(EXPORT_COLUMNS)

    def test_export_json(self, records):
        data = json.loads(export_json(records))
        assert data[0]['sector_pattern'] == "水下拉水上"
        assert data[0]['sector'] == ["白酒", "消费"]
        assert "贵州茅台" in export_json(records)
