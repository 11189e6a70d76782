# -*- coding: utf-8 -*-
"""
信号评分测试
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fupan.signals import SectorPattern, SignalRecord, calculate_score, score_signal
from fupan.signals.scoring import MISSING_PATTERN_REASON, MISSING_TURNOVER_REASON


class TestScoreSignal:
    """评分规则"""

    def test_rise_from_dip_with_low_tier(self):
        score, reasons = score_signal(SectorPattern.RISE_FROM_DIP, 3.2)
        assert score == 40
        assert reasons == ["板块分时：水下拉水上 +30", "换手率3.2% >= 3% +10"]

    def test_triangle_with_high_tier(self):
        score, reasons = score_signal(SectorPattern.TRIANGLE_NARROWING, 9)
        assert score == 50
        assert reasons == ["板块分时：波动三角收窄 +20", "换手率9% >= 8% +30"]

    @pytest.mark.parametrize("turnover, expected", [
        (8, 30),
        (8.0, 30),
        (7.99, 20),
        (5, 20),
        (4.99, 10),
        (3, 10),
        (2.99, 0),
        (0, 0),
        (-1, 0),
    ])
    def test_turnover_tiers_are_exclusive(self, turnover, expected):
        score, _ = score_signal(None, turnover)
        assert score == expected

    def test_all_missing(self):
        score, reasons = score_signal(None, None)
        assert score == 0
        assert reasons == [MISSING_PATTERN_REASON, MISSING_TURNOVER_REASON]

    def test_turnover_below_tiers_keeps_pattern_reason(self):
        score, reasons = score_signal(SectorPattern.RISE_FROM_DIP, 1.0)
        assert score == 30
        assert reasons == ["板块分时：水下拉水上 +30"]

    def test_maximum_score(self):
        score, _ = score_signal(SectorPattern.RISE_FROM_DIP, 20)
        assert score == 60


class TestCalculateScore:
    """calculate_score 接口"""

    def test_tier_exclusivity(self):
        assert calculate_score({'sector_pattern': None, 'turnover': 8})['score'] == 30

    def test_accepts_text_values(self):
        result = calculate_score({'sector_pattern': "水下拉水上", 'turnover': "6.5%"})
        assert result['score'] == 50
        assert result['reason'][1] == "换手率6.5% >= 5% +20"

    def test_unknown_pattern_is_missing(self):
        result = calculate_score({'sector_pattern': "放量突破", 'turnover': None})
        assert result['score'] == 0
        assert MISSING_PATTERN_REASON in result['reason']

    def test_accepts_record_object(self):
        record = SignalRecord(
            date="2024-06-03", code="600519", name="贵州茅台", sector=["白酒"],
            sector_pattern=SectorPattern.TRIANGLE_NARROWING, turnover=5.0,
            chg=None, amount=None, debt_ratio=None, score=0, reason=[]
        )
        assert calculate_score(record)['score'] == 40

    def test_ignores_supplied_score(self):
        result = calculate_score({'sector_pattern': None, 'turnover': None, 'score': 99, 'reason': ["x"]})
        assert result['score'] == 0
        assert "x" not in result['reason']

    @pytest.mark.parametrize("partial", [
        {},
        {'sector_pattern': "水下拉水上", 'turnover': 100},
        {'sector_pattern': "true", 'turnover': "abc"},
        {'sector_pattern': 123, 'turnover': float("nan")},
        {'sector_pattern': None, 'turnover': -50},
        None,
    ])
    def test_range_and_non_empty_reasons(self, partial):
        result = calculate_score(partial)
        assert 0 <= result['score'] <= 100
        assert isinstance(result['score'], int)
        assert len(result['reason']) >= 1

    def test_idempotent(self):
        partial = {'sector_pattern': "波动三角收窄", 'turnover': 4.2}
        assert calculate_score(partial) == calculate_score(partial)
