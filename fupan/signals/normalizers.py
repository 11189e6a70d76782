# -*- coding: utf-8 -*-
"""
代码与数值标准化
"""

import math
import re
from typing import Any, Optional

from fupan.utils.helpers import format_plain_number

CODE_LENGTH = 6

# 百分号、量级单位与千分位
_NUMBER_NOISE = re.compile(r"[%％亿万,]")
_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _to_text(raw: Any) -> str:
    if isinstance(raw, float) and math.isfinite(raw):
        return format_plain_number(raw)
    return str(raw)


def normalize_code(raw: Any) -> str:
    """
    标准化股票代码: 去掉所有非数字字符后左补0到6位

    空值返回空字符串；超过6位的数字串不截断。
    """
    if raw is None or isinstance(raw, bool) or raw == "" or raw == 0:
        return ""
    digits = re.sub(r"\D", "", _to_text(raw))
    return digits.rjust(CODE_LENGTH, "0")


def parse_percent_or_number(raw: Any) -> Optional[float]:
    """
    解析百分比/金额文本为浮点数

    去掉 % ％ 亿 万 和千分位逗号后按前缀解析，如 "3.2%" → 3.2, "1,234.5万" → 1234.5。
    空值或无法解析返回None，不抛异常、不返回NaN。
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return None
        return value if math.isfinite(value) else None

    text = _NUMBER_NOISE.sub("", str(raw)).strip()
    if not text:
        return None

    match = _LEADING_FLOAT.match(text)
    if not match:
        return None

    try:
        value = float(match.group(0))
    except ValueError:
        return None
    return value if math.isfinite(value) else None
