# -*- coding: utf-8 -*-
"""
Flask API接口
"""

import re

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from fupan.config.settings import settings
from fupan.data.collectors.tushare_collector import TushareError, tushare_collector
from fupan.data.storage.db_manager import SignalValidationError, get_db_manager
from fupan.signals import calculate_score, parse_signal_text
from fupan.signals.stats import (
    daily_summary, export_csv, export_json, sector_stats, stock_history
)
from fupan.strategy.ai_analyzer import AIServiceError, get_ai_analyzer
from fupan.utils.helpers import days_ago_str, today_str
from fupan.utils.logger import get_logger

logger = get_logger(__name__)

app = Flask(__name__)
app.json.ensure_ascii = False
CORS(app)


def _body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


_SNAKE_PART = re.compile(r"_([a-z0-9])")


def _camel_keys(data):
    """行情结果的 snake_case 键转为 camelCase"""
    if isinstance(data, dict):
        return {_SNAKE_PART.sub(lambda m: m.group(1).upper(), k): _camel_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_camel_keys(v) for v in data]
    return data


@app.route('/api/health', methods=['GET'])
def health():
    """健康检查"""
    return jsonify({'status': 'ok'})


# ==================== 信号记录 ====================

@app.route('/api/signals', methods=['GET'])
def get_signals():
    """获取信号记录，支持 from/to 日期范围"""
    try:
        records = get_db_manager().get_signals(request.args.get('from'), request.args.get('to'))
        return jsonify([r.to_dict() for r in records])
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"获取信号记录失败: {e}")
        return jsonify({'error': str(e) or '获取数据失败'}), 500


@app.route('/api/signals', methods=['POST'])
def save_signals():
    """批量保存信号记录"""
    records = request.get_json(silent=True)
    try:
        count = get_db_manager().save_signals(records)
        return jsonify({'success': True, 'count': count})
    except SignalValidationError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"保存信号记录失败: {e}")
        return jsonify({'error': str(e) or '保存数据失败'}), 500


@app.route('/api/signals', methods=['DELETE'])
def clear_signals():
    """清空所有信号记录"""
    try:
        count = get_db_manager().clear_signals()
        return jsonify({'success': True, 'count': count})
    except Exception as e:
        logger.error(f"清空信号记录失败: {e}")
        return jsonify({'error': str(e) or '清空数据失败'}), 500


@app.route('/api/signals/parse', methods=['POST'])
def parse_signals():
    """解析粘贴文本，不保存"""
    data = _body()
    records = parse_signal_text(data.get('text'), data.get('date') or None)
    return jsonify([r.to_dict() for r in records])


@app.route('/api/signals/score', methods=['POST'])
def score_signal():
    """按板块分时形态和换手率计算评分"""
    return jsonify(calculate_score(_body()))


# ==================== 统计与导出 ====================

@app.route('/api/summary', methods=['GET'])
def get_summary():
    """单日概览"""
    day = request.args.get('date') or today_str()
    try:
        records = get_db_manager().get_signals(day, day)
        return jsonify(daily_summary(records, day).to_dict())
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"获取单日概览失败: {e}")
        return jsonify({'error': str(e)}), 500


@app.route('/api/sectors', methods=['GET'])
def get_sector_stats():
    """近N天板块统计"""
    days = request.args.get('days', settings.score.window_days, type=int)
    try:
        records = get_db_manager().get_signals(date_from=days_ago_str(days))
        return jsonify([s.to_dict() for s in sector_stats(records)])
    except Exception as e:
        logger.error(f"板块统计失败: {e}")
        return jsonify({'error': str(e)}), 500


@app.route('/api/stocks', methods=['GET'])
def get_stock_history():
    """近N天个股出现历史"""
    days = request.args.get('days', settings.score.window_days, type=int)
    try:
        records = get_db_manager().get_signals(date_from=days_ago_str(days))
        return jsonify([h.to_dict() for h in stock_history(records)])
    except Exception as e:
        logger.error(f"个股统计失败: {e}")
        return jsonify({'error': str(e)}), 500


@app.route('/api/export', methods=['GET'])
def export_signals():
    """导出全部记录 (csv/json)"""
    fmt = request.args.get('format', 'csv').lower()
    if fmt not in ('csv', 'json'):
        return jsonify({'error': f'不支持的导出格式: {fmt}'}), 400

    try:
        records = get_db_manager().get_signals()
    except Exception as e:
        logger.error(f"导出失败: {e}")
        return jsonify({'error': str(e)}), 500

    filename = f"signals_{today_str()}.{fmt}"
    if fmt == 'csv':
        body, mimetype = export_csv(records), 'text/csv; charset=utf-8'
    else:
        body, mimetype = export_json(records), 'application/json; charset=utf-8'
    return Response(body, mimetype=mimetype,
                    headers={'Content-Disposition': f'attachment; filename={filename}'})


# ==================== 板块分时截图 ====================

@app.route('/api/sector-screenshots', methods=['GET'])
def get_screenshots():
    """获取截图，可按 date/sector 筛选"""
    try:
        shots = get_db_manager().get_screenshots(request.args.get('date'), request.args.get('sector'))
        return jsonify([s.to_dict() for s in shots])
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"获取截图失败: {e}")
        return jsonify({'error': str(e) or '获取截图失败'}), 500


@app.route('/api/sector-screenshots', methods=['POST'])
def upload_screenshot():
    """上传/更新截图"""
    data = _body()
    try:
        get_db_manager().upsert_screenshot(data.get('date'), data.get('sector'), data.get('imageDataUrl'))
        return jsonify({'success': True})
    except SignalValidationError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"保存截图失败: {e}")
        return jsonify({'error': str(e) or '保存截图失败'}), 500


# ==================== Tushare 行情 ====================

@app.route('/api/tushare/trade-cal', methods=['GET'])
def get_trade_cal():
    """区间内的非交易日"""
    start_date = request.args.get('startDate')
    end_date = request.args.get('endDate')
    if not start_date or not end_date:
        return jsonify({'error': '缺少参数: startDate 和 endDate (格式: YYYYMMDD)'}), 400

    try:
        return jsonify({'nonTradingDays': tushare_collector.get_non_trading_days(start_date, end_date)})
    except TushareError as e:
        logger.error(f"获取交易日历失败: {e}")
        return jsonify({'error': str(e) or '获取交易日历失败'}), 500


@app.route('/api/tushare/stock-info', methods=['GET'])
def get_stock_info():
    """根据代码获取股票名称/行业/涨跌幅"""
    code = request.args.get('code')
    if not code:
        return jsonify({'error': '缺少参数: code (6位股票代码)'}), 400

    try:
        info = tushare_collector.get_stock_info(code, request.args.get('tradeDate') or None)
    except TushareError as e:
        logger.error(f"获取股票信息失败 [{code}]: {e}")
        return jsonify({'error': str(e) or '获取股票信息失败'}), 500

    if not info:
        return jsonify({'error': '未找到股票信息，请检查代码是否正确'}), 404
    return jsonify(info)


def _code_query(fetch, label: str):
    """?code= 类行情接口：缺参数400，无数据404，接口错误500"""
    code = request.args.get('code')
    if not code:
        return jsonify({'error': '缺少参数 code（6位股票代码）'}), 400

    try:
        result = fetch(code)
    except TushareError as e:
        logger.error(f"获取{label}失败 [{code}]: {e}")
        return jsonify({'error': str(e) or f'获取{label}失败'}), 500

    if not result:
        return jsonify({'error': f'未获取到 {code} 的数据'}), 404
    return jsonify(_camel_keys(result))


@app.route('/api/tushare/ma20', methods=['GET'])
def get_ma20():
    """20日均线及状态 above/touched/below"""
    return _code_query(tushare_collector.get_ma20, "20日均线")


@app.route('/api/tushare/ma20-chart', methods=['GET'])
def get_ma20_chart():
    """20日均线 + 近30日K线"""
    return _code_query(tushare_collector.get_ma20_with_ohlc, "20日均线K线")


@app.route('/api/tushare/ma5-ma30', methods=['GET'])
def get_ma5_ma30():
    """5日/30日均线是否接近"""
    return _code_query(tushare_collector.get_ma5_ma30, "5日/30日均线")


@app.route('/api/tushare/daily-chart', methods=['GET'])
def get_daily_chart():
    """近30日收盘价与均线序列"""
    return _code_query(tushare_collector.get_daily_chart_data, "日线图数据")


@app.route('/api/tushare/limit-up', methods=['GET'])
def get_limit_up():
    """记录日之后首次涨停日期"""
    code = request.args.get('code')
    record_date = request.args.get('recordDate')
    if not code or not record_date:
        return jsonify({'error': '缺少参数 code 或 recordDate'}), 400

    try:
        return jsonify({'limitUpDate': tushare_collector.get_first_limit_up_since(code, record_date)})
    except TushareError as e:
        logger.error(f"获取涨停数据失败 [{code} {record_date}]: {e}")
        return jsonify({'error': str(e) or '获取涨停数据失败'}), 500


# ==================== AI ====================

@app.route('/api/ai/chat', methods=['POST'])
def ai_chat():
    """AI对话"""
    data = _body()
    try:
        content = get_ai_analyzer().chat(data.get('messages'), data.get('model'))
        return jsonify({'content': content})
    except AIServiceError as e:
        return jsonify({'error': str(e)}), e.status


@app.route('/api/ai/review-suggestions', methods=['POST'])
def ai_review_suggestions():
    """复盘智囊：当日个股 + 板块分时截图 → 次日操作建议"""
    data = _body()
    try:
        content = get_ai_analyzer().review_suggestions(
            data.get('date'),
            data.get('records') or [],
            data.get('sectorScreenshots') or []
        )
        return jsonify({'content': content})
    except AIServiceError as e:
        return jsonify({'error': str(e)}), e.status


def run_api(host='0.0.0.0', port=5000, debug=False):
    """启动API服务"""
    get_db_manager().init_tables()
    app.run(host=host, port=port, debug=debug)


if __name__ == '__main__':
    run_api(debug=True)
