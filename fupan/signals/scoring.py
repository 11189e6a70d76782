# -*- coding: utf-8 -*-
"""
信号评分引擎
板块分时形态 + 换手率档位的规则打分，结果为0-100的整数和评分原因
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from fupan.config.settings import settings
from fupan.signals.normalizers import parse_percent_or_number
from fupan.signals.types import SectorPattern
from fupan.utils.helpers import format_plain_number

MISSING_PATTERN_REASON = "板块分时信息缺失"
MISSING_TURNOVER_REASON = "换手率信息缺失"
INSUFFICIENT_REASON = "信息不足/需补字段"


def score_signal(
    sector_pattern: Optional[SectorPattern],
    turnover: Optional[float]
) -> Tuple[int, List[str]]:
    """
    计算信号评分

    Args:
        sector_pattern: 板块分时形态，None表示缺失
        turnover: 换手率(%)，None表示缺失

    Returns:
        (评分, 评分原因列表)
    """
    cfg = settings.score
    score = 0
    reasons: List[str] = []

    if sector_pattern == SectorPattern.RISE_FROM_DIP:
        score += cfg.rise_from_dip_bonus
        reasons.append(f"板块分时：{SectorPattern.RISE_FROM_DIP.value} +{cfg.rise_from_dip_bonus}")
    elif sector_pattern == SectorPattern.TRIANGLE_NARROWING:
        score += cfg.triangle_bonus
        reasons.append(f"板块分时：{SectorPattern.TRIANGLE_NARROWING.value} +{cfg.triangle_bonus}")
    elif sector_pattern is None:
        reasons.append(MISSING_PATTERN_REASON)

    # 换手率档位互斥，只取命中的最高档
    if turnover is not None:
        for threshold, bonus in cfg.turnover_tiers:
            if turnover >= threshold:
                score += bonus
                reasons.append(
                    f"换手率{format_plain_number(turnover)}% >= {format_plain_number(threshold)}% +{bonus}"
                )
                break
    else:
        reasons.append(MISSING_TURNOVER_REASON)

    score = max(cfg.min_score, min(cfg.max_score, score))

    if not reasons:
        reasons.append(INSUFFICIENT_REASON)

    return int(score), reasons


def calculate_score(partial: Any) -> Dict[str, Any]:
    """
    根据记录的 sector_pattern 和 turnover 计算评分

    Args:
        partial: dict 或带 sector_pattern/turnover 属性的对象

    Returns:
        {"score": int, "reason": [str, ...]}
    """
    if isinstance(partial, Mapping):
        raw_pattern = partial.get('sector_pattern')
        raw_turnover = partial.get('turnover')
    else:
        raw_pattern = getattr(partial, 'sector_pattern', None)
        raw_turnover = getattr(partial, 'turnover', None)

    score, reasons = score_signal(
        SectorPattern.from_value(raw_pattern),
        parse_percent_or_number(raw_turnover)
    )
    return {'score': score, 'reason': reasons}
