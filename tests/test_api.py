# -*- coding: utf-8 -*-
"""
Flask API测试
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fupan.core import api
from fupan.data.collectors import TushareError
from fupan.data.storage import DatabaseManager
from fupan.strategy import AIServiceError
from fupan.utils.helpers import today_str


class FakeCollector:
    """只实现被测路由用到的方法"""

    def __init__(self, ma20=None, error=None):
        self.ma20 = ma20
        self.error = error

    def get_non_trading_days(self, start, end):
        if self.error:
            raise self.error
        return ["2024-06-08", "2024-06-09"]

    def get_stock_info(self, code, trade_date=None):
        if code == "600519":
            return {'name': "贵州茅台", 'industry': "白酒", 'chg': None,
                    'turnover': None, 'amount': None, 'debt_ratio': None}
        return None

    def get_ma20(self, code):
        if self.error:
            raise self.error
        return self.ma20

    get_ma20_with_ohlc = get_ma20
    get_ma5_ma30 = get_ma20
    get_daily_chart_data = get_ma20

    def get_first_limit_up_since(self, code, record_date):
        return "2024-06-05"


class FakeAnalyzer:
    def chat(self, messages, model=None):
        if not messages:
            raise AIServiceError("缺少 messages 参数", status=400)
        return "回复"

    def review_suggestions(self, day, records, screenshots):
        if not day:
            raise AIServiceError("缺少 date 参数", status=400)
        return f"{day} {len(records)} {len(screenshots)}"


class TestSignalsAPI:
    """信号记录接口"""

    @pytest.fixture
    def db(self, tmp_path, monkeypatch):
        manager = DatabaseManager(f"sqlite:///{tmp_path / 'api.db'}")
        manager.init_tables()
        monkeypatch.setattr(api, 'get_db_manager', lambda: manager)
        yield manager
        manager.close()

    @pytest.fixture
    def client(self, db):
        api.app.config['TESTING'] = True
        return api.app.test_client()

    def _save(self, client, text, day):
        records = client.post('/api/signals/parse', json={'text': text, 'date': day}).get_json()
        return client.post('/api/signals', json=records)

    def test_health(self, client):
        assert client.get('/api/health').get_json() == {'status': 'ok'}

    def test_parse_does_not_save(self, client, db):
        resp = client.post('/api/signals/parse', json={'text': "代码,名称,换手率\n002371,Y,6.5", 'date': "2024-06-03"})
        data = resp.get_json()

        assert resp.status_code == 200
        assert data[0]['code'] == "002371"
        assert data[0]['score'] == 20
        assert data[0]['sector_pattern'] is None
        assert db.get_signals() == []

    @pytest.mark.parametrize("body", [{'text': "[{invalid"}, {'text': None}, {}, None])
    def test_parse_never_fails(self, client, body):
        resp = client.post('/api/signals/parse', json=body)
        assert resp.status_code == 200
        assert resp.get_json() == []

    def test_score(self, client):
        resp = client.post('/api/signals/score', json={'sector_pattern': None, 'turnover': 8})
        assert resp.get_json()['score'] == 30

    def test_save_list_and_filter(self, client):
        resp = self._save(client, "代码,名称,板块\n600519,贵州茅台,白酒\n000858,五粮液,白酒", "2024-06-03")
        assert resp.get_json() == {'success': True, 'count': 2}
        self._save(client, "代码,名称\n002371,北方华创", "2024-06-05")

        all_records = client.get('/api/signals').get_json()
        assert [r['date'] for r in all_records] == ["2024-06-05", "2024-06-03", "2024-06-03"]

        filtered = client.get('/api/signals?from=2024-06-04&to=2024-06-30').get_json()
        assert [r['code'] for r in filtered] == ["002371"]

    def test_save_rejects_bad_payload(self, client):
        assert client.post('/api/signals', json=[]).status_code == 400
        assert client.post('/api/signals', json={'code': "1"}).status_code == 400
        resp = client.post('/api/signals', json=[{'date': "2024-06-03", 'code': "600519", 'sector': []}])
        assert resp.status_code == 400
        assert 'error' in resp.get_json()

    def test_bad_date_filter(self, client):
        assert client.get('/api/signals?from=yesterday').status_code == 400

    def test_delete(self, client, db):
        self._save(client, "代码,名称\n600519,X", "2024-06-03")
        assert client.delete('/api/signals').get_json()['success'] is True
        assert db.get_signals() == []

    def test_summary_sectors_stocks(self, client):
        day = today_str()
        self._save(client, "代码,名称,板块,板块分时,换手率\n600519,贵州茅台,白酒,水下拉水上,9\n000858,五粮液,白酒,,1", day)

        summary = client.get(f'/api/summary?date={day}').get_json()
        assert summary['totalCount'] == 2
        assert summary['highPriority'] == 0
        assert summary['alternative'] == 1
        assert summary['eliminated'] == 1
        assert summary['records'][0]['code'] == "600519"

        sectors = client.get('/api/sectors?days=30').get_json()
        assert sectors[0]['sector'] == "白酒"
        assert sectors[0]['count'] == 1
        assert sectors[0]['avgScore'] == 30
        assert sectors[0]['topRecords'][0]['sector_pattern'] == "水下拉水上"

        stocks = client.get('/api/stocks').get_json()
        assert {s['code'] for s in stocks} == {"600519", "000858"}
        assert {'avgTurnover', 'avgScore', 'maxScore'} <= set(stocks[0])

    def test_export(self, client):
        self._save(client, "代码,名称,板块\n600519,贵州茅台,白酒", "2024-06-03")

        csv_resp = client.get('/api/export?format=csv')
        assert csv_resp.status_code == 200
        assert csv_resp.mimetype == 'text/csv'
        assert "贵州茅台" in csv_resp.get_data(as_text=True)
        assert 'attachment' in csv_resp.headers['Content-Disposition']

        json_resp = client.get('/api/export?format=json')
        assert json_resp.get_json()[0]['code'] == "600519"

        assert client.get('/api/export?format=xml').status_code == 400

    def test_screenshots(self, client):
        body = {'date': "2024-06-03", 'sector': "白酒", 'imageDataUrl': "data:image/png;base64,AAA"}
        assert client.post('/api/sector-screenshots', json=body).get_json() == {'success': True}
        assert client.post('/api/sector-screenshots', json={'date': "2024-06-03"}).status_code == 400

        shots = client.get('/api/sector-screenshots?date=2024-06-03').get_json()
        assert shots == [body]


class TestTushareAPI:
    """行情接口"""

    @pytest.fixture
    def client(self):
        api.app.config['TESTING'] = True
        return api.app.test_client()

    def test_trade_cal(self, client, monkeypatch):
        monkeypatch.setattr(api, 'tushare_collector', FakeCollector())
        resp = client.get('/api/tushare/trade-cal?startDate=20240601&endDate=20240630')
        assert resp.get_json() == {'nonTradingDays': ["2024-06-08", "2024-06-09"]}
        assert client.get('/api/tushare/trade-cal?startDate=20240601').status_code == 400

    def test_trade_cal_error(self, client, monkeypatch):
        monkeypatch.setattr(api, 'tushare_collector', FakeCollector(error=TushareError("token无效")))
        resp = client.get('/api/tushare/trade-cal?startDate=20240601&endDate=20240630')
        assert resp.status_code == 500
        assert resp.get_json() == {'error': "token无效"}

    def test_stock_info(self, client, monkeypatch):
        monkeypatch.setattr(api, 'tushare_collector', FakeCollector())
        assert client.get('/api/tushare/stock-info?code=600519').get_json()['name'] == "贵州茅台"
        assert client.get('/api/tushare/stock-info?code=999999').status_code == 404
        assert client.get('/api/tushare/stock-info').status_code == 400

    @pytest.mark.parametrize("path", ['ma20', 'ma20-chart', 'ma5-ma30', 'daily-chart'])
    def test_code_routes(self, client, monkeypatch, path):
        monkeypatch.setattr(api, 'tushare_collector', FakeCollector(ma20={'ma20': 10.1}))
        assert client.get(f'/api/tushare/{path}?code=600519').get_json() == {'ma20': 10.1}
        assert client.get(f'/api/tushare/{path}').status_code == 400

        monkeypatch.setattr(api, 'tushare_collector', FakeCollector(ma20=None))
        assert client.get(f'/api/tushare/{path}?code=600519').status_code == 404

        monkeypatch.setattr(api, 'tushare_collector', FakeCollector(error=TushareError("数据仅 5 条")))
        assert client.get(f'/api/tushare/{path}?code=600519').status_code == 500

    def test_quote_keys_are_camel_case(self, client, monkeypatch):
        result = {
            'ma20': 10.1, 'latest_close': 10.5, 'latest_trade_date': "2024-06-03",
            'typical_near_ma30': True, 'ohlc': [{'date': "2024-06-03", 'close': 10.5}],
        }
        monkeypatch.setattr(api, 'tushare_collector', FakeCollector(ma20=result))

        data = client.get('/api/tushare/ma20-chart?code=600519').get_json()
        assert data == {
            'ma20': 10.1, 'latestClose': 10.5, 'latestTradeDate': "2024-06-03",
            'typicalNearMa30': True, 'ohlc': [{'date': "2024-06-03", 'close': 10.5}],
        }

    def test_stock_info_keeps_record_field_names(self, client, monkeypatch):
        monkeypatch.setattr(api, 'tushare_collector', FakeCollector())
        data = client.get('/api/tushare/stock-info?code=600519').get_json()
        assert 'debt_ratio' in data

    def test_limit_up(self, client, monkeypatch):
        monkeypatch.setattr(api, 'tushare_collector', FakeCollector())
        resp = client.get('/api/tushare/limit-up?code=600519&recordDate=2024-06-03')
        assert resp.get_json() == {'limitUpDate': "2024-06-05"}
        assert client.get('/api/tushare/limit-up?code=600519').status_code == 400


class TestAIAPI:
    """AI接口"""

    @pytest.fixture
    def client(self, monkeypatch):
        monkeypatch.setattr(api, 'get_ai_analyzer', lambda: FakeAnalyzer())
        api.app.config['TESTING'] = True
        return api.app.test_client()

    def test_chat(self, client):
        resp = client.post('/api/ai/chat', json={'messages': [{'role': "user", 'content': "hi"}]})
        assert resp.get_json() == {'content': "回复"}
        assert client.post('/api/ai/chat', json={}).status_code == 400

    def test_review(self, client):
        body = {'date': "2024-06-03", 'records': [{'code': "1"}],
                'sectorScreenshots': [{'sector': "白酒", 'imageDataUrl': "data:x"}]}
        assert client.post('/api/ai/review-suggestions', json=body).get_json() == {'content': "2024-06-03 1 1"}
        assert client.post('/api/ai/review-suggestions', json={}).status_code == 400
