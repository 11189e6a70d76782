# -*- coding: utf-8 -*-
"""
AI复盘助手
使用Groq API进行对话和当日复盘建议生成
"""
from typing import Any, Dict, List, Optional, Sequence

from groq import APIError, APIStatusError, Groq

from fupan.config.settings import settings
from fupan.signals.types import SectorScreenshot, SignalRecord
from fupan.utils.helpers import format_plain_number
from fupan.utils.logger import get_logger

logger = get_logger(__name__)


REVIEW_SYSTEM_PROMPT = """你是A股日内复盘顾问。根据用户提供的当日板块分时图与个股数据，输出可执行的次日操作建议。

规则：
1. 先看板块分时形态（水下拉水上、波动三角收窄等）判断板块强弱。
2. 结合个股：换手、涨跌、市值、负债率，区分龙头与跟风。
3. 输出格式：分条列出，每条一行或两行，每条不超过80字。标明「优先」「观察」「回避」及简要理由。
4. 禁止空洞表述，只给具体标的与理由。"""

EMPTY_STOCK_TEXT = "（当日无个股数据）"


class AIServiceError(Exception):
    """AI服务调用失败，status 对应返回给前端的HTTP状态码"""

    def __init__(self, message: str, status: int = 500):
        super().__init__(message)
        self.status = status


def _record_dict(record: Any) -> Dict[str, Any]:
    if isinstance(record, SignalRecord):
        return record.to_dict()
    return record if isinstance(record, dict) else {}


def _text(value: Any) -> str:
    """None 显示为 '-'，数字去掉多余的 .0"""
    if value is None or value == "":
        return "-"
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_plain_number(value)
    return str(value)


def _image_url(shot: Any) -> Optional[str]:
    if isinstance(shot, SectorScreenshot):
        return shot.image_data_url
    if isinstance(shot, dict):
        url = shot.get('imageDataUrl') or shot.get('image_data_url')
        return url if isinstance(url, str) and url else None
    return None


class AIAnalyzer:
    """Groq AI复盘助手"""

    def __init__(self, client: Groq = None, api_key: str = None):
        """
        Args:
            client: 已创建的Groq客户端，为空时按配置创建
            api_key: Groq API Key，默认读取 GROQ_API_KEY
        """
        self.client = client
        if self.client is None:
            key = api_key or settings.groq.api_key
            if key:
                self.client = Groq(api_key=key)
            else:
                logger.warning("未配置Groq API Key，AI功能不可用")

    @property
    def available(self) -> bool:
        return self.client is not None

    def _complete(self, messages: List[Dict[str, Any]], model: str) -> str:
        if not self.client:
            raise AIServiceError("未配置 AI API Key（GROQ_API_KEY）", status=500)

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                max_tokens=settings.groq.max_tokens,
                stream=False
            )
        except APIStatusError as e:
            logger.error(f"AI服务返回错误 [{e.status_code}]: {e.message}")
            raise AIServiceError(f"AI 服务异常: {e.message}", status=e.status_code)
        except APIError as e:
            logger.error(f"AI服务请求失败: {e}")
            raise AIServiceError(f"AI 服务异常: {e}", status=502)

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def chat(self, messages: Sequence[Dict[str, Any]], model: str = None) -> str:
        """
        多轮对话

        Args:
            messages: [{'role': 'user'|'assistant'|'system', 'content': str}]
            model: 模型名称，默认使用配置中的对话模型

        Returns:
            回复内容
        """
        if not isinstance(messages, (list, tuple)) or len(messages) == 0:
            raise AIServiceError("缺少 messages 参数", status=400)
        return self._complete(list(messages), model or settings.groq.model)

    @staticmethod
    def format_stock_data(records: Sequence[Any]) -> str:
        """个股数据格式化为每只一行的文本"""
        if not records:
            return EMPTY_STOCK_TEXT

        lines = []
        for record in records:
            r = _record_dict(record)
            chg = r.get('chg')
            lines.append(
                f"- {_text(r.get('code'))} {_text(r.get('name'))}"
                f" | 板块: {'、'.join(str(s) for s in r.get('sector') or [])}"
                f" | 板块分时: {r.get('sector_pattern') or '-'}"
                f" | 换手{_text(r.get('turnover'))}%"
                f" | 涨跌{_text(chg) + '%' if chg is not None else '-'}"
                f" | 市值{_text(r.get('amount'))}亿"
                f" | 负债率{_text(r.get('debt_ratio'))}%"
            )
        return "\n".join(lines)

    def build_review_messages(
        self,
        day: str,
        records: Sequence[Any],
        screenshots: Sequence[Any] = ()
    ) -> List[Dict[str, Any]]:
        """构建复盘建议的 system + 多模态 user 消息"""
        records = list(records or [])

        sectors: List[str] = []
        for record in records:
            for s in _record_dict(record).get('sector') or []:
                if s not in sectors:
                    sectors.append(s)

        data_desc = (
            f"【{day} 复盘数据】\n\n"
            f"一、当日个股（共 {len(records)} 只）：\n{self.format_stock_data(records)}\n\n"
            f"二、涉及板块：{'、'.join(sectors) or '无'}\n\n"
            "三、板块分时图：下方为各板块当日分时截图。请根据形态判断强弱，"
            "并结合个股数据给出次日操作建议（优先/观察/回避 + 理由）。"
        )

        content: List[Dict[str, Any]] = [{'type': "text", 'text': data_desc}]
        for shot in screenshots or []:
            url = _image_url(shot)
            if url:
                content.append({'type': "image_url", 'image_url': {'url': url}})

        return [
            {'role': "system", 'content': REVIEW_SYSTEM_PROMPT},
            {'role': "user", 'content': content},
        ]

    def review_suggestions(
        self,
        day: str,
        records: Sequence[Any] = (),
        screenshots: Sequence[Any] = ()
    ) -> str:
        """
        复盘智囊：根据当日个股数据与板块分时截图生成次日操作建议

        Args:
            day: 日期 YYYY-MM-DD
            records: 当日 SignalRecord 或 dict 列表
            screenshots: SectorScreenshot 或 {'sector', 'imageDataUrl'} 列表

        Returns:
            建议文本
        """
        if not day:
            raise AIServiceError("缺少 date 参数", status=400)

        messages = self.build_review_messages(day, records, screenshots)
        logger.info(f"生成复盘建议: {day} 个股{len(records or [])}只")
        return self._complete(messages, settings.groq.vision_model)


# 全局实例
ai_analyzer = None


def get_ai_analyzer() -> AIAnalyzer:
    """获取AI复盘助手实例"""
    global ai_analyzer
    if ai_analyzer is None:
        ai_analyzer = AIAnalyzer()
    return ai_analyzer
