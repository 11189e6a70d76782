# -*- coding: utf-8 -*-
"""
复盘信号日志 - 命令行入口
"""

import argparse
import sys
import os

from fupan.signals import parse_signal_text
from fupan.signals.stats import daily_summary, export_csv, export_json, records_frame
from fupan.utils.logger import get_logger

logger = get_logger(__name__)


def _read_text(path: str) -> str:
    if path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def cmd_parse(args):
    """解析命令：只解析不保存"""
    records = parse_signal_text(_read_text(args.file), args.date)

    if not records:
        print("未识别到有效记录")
        return

    if args.json:
        print(export_json(records))
        return

    print(records_frame(records).to_string(index=False))
    summary = daily_summary(records)
    print(f"\n共 {summary.total_count} 条: 优先 {summary.high_priority}, "
          f"备选 {summary.alternative}, 淘汰 {summary.eliminated}")


def cmd_import(args):
    """导入命令：解析后保存到数据库"""
    from fupan.data.storage import SignalValidationError, get_db_manager

    records = parse_signal_text(_read_text(args.file), args.date)
    if not records:
        print("未识别到有效记录")
        return

    db = get_db_manager()
    db.init_tables()
    try:
        count = db.save_signals(records)
    except SignalValidationError as e:
        print(f"导入失败: {e}")
        sys.exit(1)
    print(f"成功导入 {count} 条记录")


def cmd_export(args):
    """导出命令"""
    from fupan.data.storage import get_db_manager

    records = get_db_manager().get_signals(args.date_from, args.date_to)
    content = export_csv(records) if args.format == 'csv' else export_json(records)

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(content)
        print(f"已导出 {len(records)} 条记录到 {args.output}")
    else:
        print(content)


def cmd_dashboard(args):
    """启动仪表盘"""
    port = args.port
    print(f"启动Streamlit仪表盘...")
    app_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "visualization", "dashboard", "app.py")
    os.system(f'"{sys.executable}" -m streamlit run "{app_path}" --server.port {port}')


def cmd_api(args):
    """启动API服务"""
    port = args.port
    print(f"启动API服务在端口 {port}...")
    from fupan.core.api import run_api
    run_api(port=port, debug=args.debug)


def cmd_init_db(args):
    """初始化数据库"""
    print("初始化数据库表...")
    from fupan.data.storage import get_db_manager
    db = get_db_manager()
    db.init_tables()
    print("数据库表初始化完成")


def main():
    parser = argparse.ArgumentParser(description='复盘信号日志')
    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # parse 命令
    parse_parser = subparsers.add_parser('parse', help='解析信号文本')
    parse_parser.add_argument('file', help='文本文件路径，- 表示标准输入')
    parse_parser.add_argument('--date', '-d', help='默认日期 YYYY-MM-DD')
    parse_parser.add_argument('--json', action='store_true', help='以JSON输出')

    # import 命令
    import_parser = subparsers.add_parser('import', help='解析并导入数据库')
    import_parser.add_argument('file', help='文本文件路径，- 表示标准输入')
    import_parser.add_argument('--date', '-d', help='默认日期 YYYY-MM-DD')

    # export 命令
    export_parser = subparsers.add_parser('export', help='导出信号记录')
    export_parser.add_argument('--format', '-f', default='csv', choices=['csv', 'json'], help='导出格式')
    export_parser.add_argument('--output', '-o', help='输出文件，默认打印到终端')
    export_parser.add_argument('--from', dest='date_from', help='开始日期')
    export_parser.add_argument('--to', dest='date_to', help='结束日期')

    # dashboard 命令
    dash_parser = subparsers.add_parser('dashboard', help='启动仪表盘')
    dash_parser.add_argument('--port', '-p', type=int, default=8501, help='端口')

    # api 命令
    api_parser = subparsers.add_parser('api', help='启动API服务')
    api_parser.add_argument('--port', '-p', type=int, default=5000, help='端口')
    api_parser.add_argument('--debug', action='store_true', help='调试模式')

    # initdb 命令
    subparsers.add_parser('initdb', help='初始化数据库')

    args = parser.parse_args()

    if args.command == 'parse':
        cmd_parse(args)
    elif args.command == 'import':
        cmd_import(args)
    elif args.command == 'export':
        cmd_export(args)
    elif args.command == 'dashboard':
        cmd_dashboard(args)
    elif args.command == 'api':
        cmd_api(args)
    elif args.command == 'initdb':
        cmd_init_db(args)
    else:
        parser.print_help()


if __name__ == '__main__':
    main()
