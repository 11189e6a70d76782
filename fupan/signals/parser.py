# -*- coding: utf-8 -*-
"""
复盘信号文本解析
把用户粘贴的内容转换为 SignalRecord 列表，依次尝试:
1. JSON 数组
2. 制表符/竖线/逗号分隔的表格 (可带表头)
3. 空行分隔的 "字段：值" 文本块
"""

import json
import re
from typing import Any, Dict, List, Optional

from fupan.config.settings import settings
from fupan.signals.normalizers import normalize_code, parse_percent_or_number
from fupan.signals.scoring import score_signal
from fupan.signals.types import SectorPattern, SignalRecord
from fupan.utils.helpers import format_date, today_str
from fupan.utils.logger import get_logger

logger = get_logger(__name__)


# 表头 → 字段
HEADER_MAP = {
    "日期": "date",
    "date": "date",
    "代码": "code",
    "股票代码": "code",
    "code": "code",
    "名称": "name",
    "股票": "name",
    "简称": "name",
    "name": "name",
    "股票简称": "name",
    "板块": "sector",
    "概念": "sector",
    "sector": "sector",
    "水下拉水上": "sector_pattern",
    "波动三角收窄": "sector_pattern",
    "板块分时": "sector_pattern",
    "信号": "sector_pattern",
    "sector_pattern": "sector_pattern",
    "换手率": "turnover",
    "换手": "turnover",
    "turnover": "turnover",
    "触发时间": "trigger_time",
    "时间": "trigger_time",
    "trigger_time": "trigger_time",
    "涨跌幅": "chg",
    "涨幅": "chg",
    "chg": "chg",
    "成交额": "amount",
    "amount": "amount",
    "资产负债率": "debt_ratio",
    "debt_ratio": "debt_ratio",
}

# 首行包含任一关键词即视为表头
HEADER_KEYWORDS = ("代码", "code", "股票", "名称", "name")

# 旧版本用布尔值表示"水下拉水上"
LEGACY_TRUE_VALUES = {"true", "是", "1", "yes"}

_SECTOR_SPLITTER = re.compile(r"[,，、]")
_LABEL_LINE = re.compile(r"^(.+?)[：:]\s*(.+)$")
_BLOCK_SPLITTER = re.compile(r"\n\s*\n")
_SIX_DIGITS = re.compile(r"^\d{6}$")
_NAME_START = re.compile(r"^[\u4e00-\u9fa5A-Za-z]")
_HAS_CJK = re.compile(r"[\u4e00-\u9fa5]")
_HAS_PERCENT = re.compile(r"[%％]")
_CHG_TOKEN = re.compile(r"[+-]?\d+\.\d+%?$")


def map_header_to_key(header: str) -> Optional[str]:
    """表头文本映射为字段名，无法识别返回None"""
    return HEADER_MAP.get(str(header).strip().lower())


def parse_sector_pattern(value: Any) -> Optional[SectorPattern]:
    """解析板块分时形态，兼容旧版布尔值"""
    text = str(value).strip() if value is not None else ""
    pattern = SectorPattern.from_value(text)
    if pattern is not None:
        return pattern
    if text.lower() in LEGACY_TRUE_VALUES:
        return SectorPattern.RISE_FROM_DIP
    return None


def _parse_sector(value: Any) -> List[str]:
    if isinstance(value, str):
        sectors = [s.strip() for s in _SECTOR_SPLITTER.split(value)]
        sectors = [s for s in sectors if s]
    elif isinstance(value, (list, tuple)):
        sectors = [str(s).strip() for s in value if s is not None and str(s).strip()]
    else:
        sectors = []
    return sectors or [settings.score.default_sector]


def normalize_record(raw: Dict[str, Any], default_date: Optional[str] = None) -> SignalRecord:
    """
    将松散的字段字典标准化为 SignalRecord

    score/reason 总是由 sector_pattern + turnover 重新计算，忽略输入中的同名字段。
    """
    raw_date = raw.get('date')
    record_date = format_date(raw_date) if raw_date else (default_date or today_str())

    sector_pattern = parse_sector_pattern(raw.get('sector_pattern'))
    turnover = parse_percent_or_number(raw.get('turnover'))
    score, reasons = score_signal(sector_pattern, turnover)

    name = raw.get('name')
    return SignalRecord(
        date=record_date,
        code=normalize_code(raw.get('code')),
        name=str(name).strip() if name else "",
        sector=_parse_sector(raw.get('sector')),
        sector_pattern=sector_pattern,
        turnover=turnover,
        chg=parse_percent_or_number(raw.get('chg')),
        amount=parse_percent_or_number(raw.get('amount')),
        debt_ratio=parse_percent_or_number(raw.get('debt_ratio')),
        score=score,
        reason=reasons,
    )


def _is_valid(record: SignalRecord) -> bool:
    return bool(record.code or record.name)


# ==================== 无表头时的位置推断 ====================

def extract_code(parts: List[str]) -> Optional[str]:
    return next((p for p in parts if _SIX_DIGITS.match(p.strip())), None)


def extract_name(parts: List[str]) -> Optional[str]:
    return next(
        (p for p in parts
         if _NAME_START.match(p.strip()) and not _HAS_PERCENT.search(p) and len(p) <= 8),
        None
    )


def extract_sector(parts: List[str]) -> Optional[str]:
    return next(
        (p for p in parts
         if "、" in p or "," in p
         or (len(p) > 4 and _HAS_CJK.search(p) and not _HAS_PERCENT.search(p))),
        None
    )


def extract_turnover(parts: List[str]) -> Optional[float]:
    for p in parts:
        if not _HAS_PERCENT.search(p):
            continue
        value = parse_percent_or_number(p)
        if value is not None:
            return value
    return None


def extract_chg(parts: List[str]) -> Optional[float]:
    for p in parts:
        if _CHG_TOKEN.search(p.strip()):
            return parse_percent_or_number(p)
    return None


# ==================== 三种解析策略 ====================

def _reject_constant(name: str):
    raise ValueError(f"非标准JSON常量: {name}")


def _parse_json(text: str, default_date: Optional[str]) -> Optional[List[SignalRecord]]:
    if not text.startswith("["):
        return None
    try:
        # NaN / Infinity 不是合法JSON
        items = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        logger.debug("JSON解析失败，改用文本解析")
        return None
    if not isinstance(items, list):
        return None

    records = []
    for item in items:
        if not isinstance(item, dict):
            continue
        record = normalize_record(item, default_date)
        if _is_valid(record):
            records.append(record)
    return records


def _parse_table(text: str, default_date: Optional[str]) -> Optional[List[SignalRecord]]:
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return None

    first_line = lines[0].lower()
    is_header = any(keyword in first_line for keyword in HEADER_KEYWORDS)
    data_lines = lines[1:] if is_header else lines

    if "\t" in first_line:
        separator = "\t"
    elif "|" in first_line:
        separator = "|"
    else:
        separator = ","

    headers: List[Optional[str]] = []
    if is_header:
        headers = [map_header_to_key(h) for h in lines[0].split(separator)]

    records = []
    for line in data_lines:
        stripped = line.strip()
        if not stripped:
            continue

        # "字段:值" 行留给文本块解析
        if ":" in stripped and "," not in stripped and "\t" not in stripped:
            continue

        parts = [p.strip() for p in stripped.split(separator)]
        if len(parts) < 2:
            continue

        raw: Dict[str, Any] = {}
        if headers:
            for key, value in zip(headers, parts):
                if key:
                    raw[key] = value
        else:
            raw['code'] = extract_code(parts)
            raw['name'] = extract_name(parts)
            raw['sector'] = extract_sector(parts)
            raw['turnover'] = extract_turnover(parts)
            raw['chg'] = extract_chg(parts)

        record = normalize_record(raw, default_date)
        if _is_valid(record):
            records.append(record)

    return records or None


def _parse_blocks(text: str, default_date: Optional[str]) -> Optional[List[SignalRecord]]:
    records = []
    for block in _BLOCK_SPLITTER.split(text):
        raw: Dict[str, Any] = {}
        for line in block.split("\n"):
            match = _LABEL_LINE.match(line.strip())
            if not match:
                continue
            key = map_header_to_key(match.group(1).strip())
            if key:
                raw[key] = match.group(2).strip()

        if raw:
            record = normalize_record(raw, default_date)
            if _is_valid(record):
                records.append(record)

    return records or None


def parse_signal_text(text: Any, default_date: Optional[str] = None) -> List[SignalRecord]:
    """
    解析粘贴的复盘信号文本

    Args:
        text: 粘贴内容 (JSON数组 / 表格 / 字段文本块)
        default_date: 记录缺少日期时使用的日期 YYYY-MM-DD

    Returns:
        SignalRecord列表，无法识别时返回空列表
    """
    if not isinstance(text, str):
        return []

    trimmed = text.replace("\r\n", "\n").strip()
    if not trimmed:
        return []

    for strategy in (_parse_json, _parse_table, _parse_blocks):
        records = strategy(trimmed, default_date)
        if records is not None:
            logger.debug(f"{strategy.__name__} 解析出 {len(records)} 条记录")
            return records

    return []
