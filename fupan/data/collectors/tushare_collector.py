# -*- coding: utf-8 -*-
"""
复盘信号日志 - Tushare Pro Data Collector
Tushare Pro 行情数据收集器
"""

import time
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Union

import pandas as pd
import requests

from fupan.config.settings import settings
from fupan.utils.helpers import from_ts_date, round2, to_ts_date
from fupan.utils.logger import get_logger
from fupan.utils.stock_utils import clean_code, is_limit_up, to_ts_code

logger = get_logger(__name__)

DAILY_FIELDS = ["ts_code", "trade_date", "open", "high", "low", "close", "pct_chg", "vol", "amount"]


class TushareError(Exception):
    """Tushare 接口调用失败"""


def _average(values: List[float]) -> float:
    return sum(values) / len(values)


def _is_near(a: float, b: float) -> bool:
    """两个价格的相对差异是否小于阈值"""
    low = min(a, b)
    return low > 0 and abs(a - b) / low < settings.MA_NEAR_THRESHOLD


def _ma20_status(close: float, high: float, ma20: float) -> str:
    """
    最新K线与20日均线的关系

    above: 收盘价 >= MA20
    touched: 最高价 >= MA20 但收盘价 < MA20
    below: 最高价 < MA20
    """
    if close >= ma20:
        return "above"
    if high >= ma20:
        return "touched"
    return "below"


class TushareCollector:
    """Tushare Pro 数据收集器"""

    def __init__(
        self,
        token: str = None,
        base_url: str = None,
        timeout: int = None,
        max_retries: int = None,
        session: requests.Session = None
    ):
        """
        初始化收集器

        Args:
            token: Tushare Token
            base_url: API地址
            timeout: 请求超时(秒)
            max_retries: 最大重试次数
            session: 自定义 requests.Session
        """
        self.token = token or settings.tushare.token
        self.base_url = base_url or settings.tushare.base_url
        self.timeout = timeout or settings.tushare.timeout
        self.max_retries = max_retries or settings.tushare.max_retries
        self.retry_delay = 1

        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})

    def _request(self, api_name: str, params: Dict = None, fields: List[str] = None) -> pd.DataFrame:
        """
        调用 Tushare API

        Args:
            api_name: 接口名称 (trade_cal, stock_basic, daily ...)
            params: 接口参数
            fields: 返回字段

        Returns:
            结果DataFrame

        Raises:
            TushareError: 请求失败或接口返回错误
        """
        if not self.token:
            raise TushareError("未配置 TUSHARE_TOKEN")

        fields = fields or []
        payload = {
            'api_name': api_name,
            'token': self.token,
            'params': params or {},
            'fields': ",".join(fields),
        }

        result = None
        for attempt in range(self.max_retries):
            try:
                response = self.session.post(self.base_url, json=payload, timeout=self.timeout)
                response.raise_for_status()
                result = response.json()
                break
            except requests.exceptions.Timeout:
                logger.warning(f"Tushare {api_name} 请求超时，重试 {attempt + 1}/{self.max_retries}")
                time.sleep(self.retry_delay)
            except requests.exceptions.RequestException as e:
                logger.error(f"Tushare {api_name} 请求失败: {e}")
                if attempt == self.max_retries - 1:
                    raise TushareError(f"Tushare {api_name} 请求失败: {e}") from e
                time.sleep(self.retry_delay)
            except ValueError as e:
                raise TushareError(f"Tushare {api_name} 返回内容无法解析") from e

        if result is None:
            raise TushareError(f"Tushare {api_name} 请求超时")

        if result.get('code') != 0:
            raise TushareError(result.get('msg') or "API调用失败")

        data = result.get('data')
        if not data:
            return pd.DataFrame(columns=fields)
        return pd.DataFrame(data.get('items') or [], columns=data.get('fields') or fields)

    # ==================== 基础接口 ====================

    def get_trade_cal(self, start_date: Union[str, date], end_date: Union[str, date]) -> pd.DataFrame:
        """
        获取上交所交易日历

        Args:
            start_date: 开始日期
            end_date: 结束日期

        Returns:
            DataFrame[cal_date, is_open]
        """
        return self._request(
            "trade_cal",
            {'exchange': "SSE", 'start_date': to_ts_date(start_date), 'end_date': to_ts_date(end_date)},
            ["cal_date", "is_open"]
        )

    def get_non_trading_days(self, start_date: Union[str, date], end_date: Union[str, date]) -> List[str]:
        """区间内的非交易日 YYYY-MM-DD"""
        df = self.get_trade_cal(start_date, end_date)
        if df.empty:
            return []
        closed = df[df['is_open'].astype(int) == 0]
        return [from_ts_date(d) for d in closed['cal_date']]

    def get_stock_basic(self, ts_code: str = None, symbol: str = None) -> pd.DataFrame:
        """
        获取上市股票基本信息

        Args:
            ts_code: Tushare代码 (如 000001.SZ)
            symbol: 6位代码，ts_code 为空时使用
        """
        params = {'exchange': "", 'list_status': "L"}
        if ts_code:
            params['ts_code'] = ts_code
        elif symbol:
            params['symbol'] = symbol
        return self._request(
            "stock_basic",
            params,
            ["ts_code", "symbol", "name", "area", "industry", "market", "list_date"]
        )

    def get_daily(self, ts_code: str, trade_date: Union[str, date]) -> pd.DataFrame:
        """获取单日日线行情"""
        return self._request(
            "daily",
            {'ts_code': ts_code, 'trade_date': to_ts_date(trade_date)},
            ["ts_code", "trade_date", "open", "high", "low", "close",
             "pre_close", "change", "pct_chg", "vol", "amount"]
        )

    def get_daily_range(
        self,
        ts_code: str,
        start_date: Union[str, date],
        end_date: Union[str, date]
    ) -> pd.DataFrame:
        """获取区间日线行情"""
        return self._request(
            "daily",
            {'ts_code': ts_code, 'start_date': to_ts_date(start_date), 'end_date': to_ts_date(end_date)},
            DAILY_FIELDS
        )

    # ==================== 组合查询 ====================

    def _recent_daily(self, code: str, days: int) -> pd.DataFrame:
        """最近N个自然日的日线，按交易日倒序 (最新在前)"""
        ts_code = to_ts_code(code)
        if not ts_code:
            raise TushareError(f"无法识别股票代码 {code}")

        end = date.today()
        df = self.get_daily_range(ts_code, end - timedelta(days=days), end)
        if df.empty:
            return df
        return df.sort_values('trade_date', ascending=False).reset_index(drop=True)

    def get_stock_info(self, code: str, trade_date: Union[str, date] = None) -> Optional[Dict[str, Any]]:
        """
        根据6位代码获取股票名称、行业及当日涨跌幅、成交额

        Args:
            code: 股票代码
            trade_date: 交易日期，为空时不查询行情

        Returns:
            股票信息字典，代码无法识别或不存在时返回None
        """
        symbol = clean_code(code)
        ts_code = to_ts_code(symbol)
        if not ts_code:
            return None

        basic = self.get_stock_basic(ts_code=ts_code)
        if basic.empty:
            return None

        stock = basic.iloc[0]
        if stock['symbol'] != symbol:
            logger.error(f"代码查询不匹配: 输入 {symbol}, 返回 {stock['symbol']}, 股票名称: {stock['name']}")
            return None

        chg = None
        amount = None
        if trade_date:
            try:
                daily = self.get_daily(stock['ts_code'], trade_date)
                if not daily.empty:
                    row = daily.iloc[0]
                    chg = float(row['pct_chg']) if pd.notna(row['pct_chg']) else None
                    # 成交额单位为千元，转换为亿元
                    amount = float(row['amount']) / 100000 if pd.notna(row['amount']) else None
            except TushareError as e:
                logger.warning(f"获取日线数据失败: {e}")

        industry = stock.get('industry')
        return {
            'name': stock['name'],
            'industry': industry if industry else None,
            'chg': chg,
            'turnover': None,
            'amount': amount,
            'debt_ratio': None,
        }

    def _ma20_from(self, df: pd.DataFrame) -> Dict[str, Any]:
        latest = df.iloc[0]
        ma20 = _average(df['close'].head(20).tolist())
        return {
            'ma20': round2(ma20),
            'latest_close': round2(latest['close']),
            'latest_high': round2(latest['high']),
            'latest_trade_date': from_ts_date(latest['trade_date']),
            'status': _ma20_status(latest['close'], latest['high'], ma20),
        }

    def get_ma20(self, code: str) -> Dict[str, Any]:
        """
        20日均线及最新价格

        Raises:
            TushareError: 无行情数据或不足20个交易日
        """
        df = self._recent_daily(code, 60)
        if df.empty:
            raise TushareError(f"未获取到 {code} 的行情数据，请确认代码正确且该股票正常交易")
        if len(df) < 20:
            raise TushareError(f"数据仅 {len(df)} 条（需 ≥20 条），无法计算20日均线")
        return self._ma20_from(df)

    def get_ma20_with_ohlc(self, code: str) -> Optional[Dict[str, Any]]:
        """20日均线 + 近30个交易日OHLC (时间正序)，不足20条返回None"""
        df = self._recent_daily(code, 60)
        if len(df) < 20:
            return None

        result = self._ma20_from(df)
        bars = df.head(30).iloc[::-1]
        result['ohlc'] = [
            {
                'date': from_ts_date(r.trade_date),
                'open': round2(r.open),
                'high': round2(r.high),
                'low': round2(r.low),
                'close': round2(r.close),
            }
            for r in bars.itertuples()
        ]
        return result

    def get_ma5_ma30(self, code: str) -> Optional[Dict[str, Any]]:
        """5日与30日均线，判断是否接近；不足30条返回None"""
        df = self._recent_daily(code, 60)
        if len(df) < 30:
            return None

        closes = df['close'].tolist()
        ma5 = _average(closes[:5])
        ma30 = _average(closes[:30])
        low = min(ma5, ma30)
        diff_ratio = abs(ma5 - ma30) / low if low > 0 else 0

        return {
            'ma5': round2(ma5),
            'ma30': round2(ma30),
            'latest_trade_date': from_ts_date(df.iloc[0]['trade_date']),
            'near': diff_ratio < settings.MA_NEAR_THRESHOLD,
        }

    def get_daily_chart_data(self, code: str) -> Optional[Dict[str, Any]]:
        """
        近30个交易日的收盘价、MA5、MA30 序列

        Returns:
            {'series', 'near', 'typical_near_ma30'}，不足30条返回None
        """
        df = self._recent_daily(code, 90)
        if len(df) < 30:
            return None

        use = df.head(60)
        closes = use['close'].tolist()
        dates = use['trade_date'].tolist()

        series = []
        for k in range(29, -1, -1):
            window5 = closes[k:k + 5]
            window30 = closes[k:k + 30]
            series.append({
                'date': from_ts_date(dates[k]),
                'close': round2(closes[k]),
                'ma5': round2(_average(window5)) if len(window5) >= 5 else None,
                'ma30': round2(_average(window30)) if len(window30) >= 30 else None,
            })

        ma5_latest = _average(closes[:5])
        ma30_latest = _average(closes[:30])

        # 用最新一根K线的 O/H/L/C 均价近似当日分时均价
        latest = use.iloc[0]
        typical = (latest['open'] + latest['high'] + latest['low'] + latest['close']) / 4

        return {
            'series': series,
            'near': _is_near(ma5_latest, ma30_latest),
            'typical_near_ma30': _is_near(typical, ma30_latest),
        }

    def get_first_limit_up_since(self, code: str, record_date: Union[str, date]) -> Optional[str]:
        """
        记录日(含)之后第一个涨停的交易日

        Args:
            code: 股票代码
            record_date: 记录日期

        Returns:
            涨停日期 YYYY-MM-DD，没有则返回None
        """
        ts_code = to_ts_code(code)
        if not ts_code:
            raise TushareError(f"无法识别股票代码 {code}")

        df = self.get_daily_range(ts_code, record_date, date.today())
        if df.empty:
            return None

        basic = self.get_stock_basic(ts_code=ts_code)
        name = basic.iloc[0]['name'] if not basic.empty else ""

        for row in df.sort_values('trade_date').itertuples():
            if pd.notna(row.pct_chg) and is_limit_up(ts_code, name, float(row.pct_chg)):
                return from_ts_date(row.trade_date)
        return None


# 创建全局收集器实例
tushare_collector = TushareCollector()
