# -*- coding: utf-8 -*-
"""
复盘信号日志 - Database Manager
数据库操作管理器
"""

import json
import math
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError

from fupan.config.settings import settings
from fupan.data.models import Base, SignalRecordRow, SectorScreenshotRow
from fupan.signals.scoring import score_signal
from fupan.signals.types import SectorPattern, SectorScreenshot, SignalRecord
from fupan.utils.helpers import parse_date
from fupan.utils.logger import get_logger

logger = get_logger(__name__)

SECTOR_JOINER = "、"


class SignalValidationError(ValueError):
    """待保存的信号数据不合法"""


def _as_dict(record: Union[SignalRecord, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(record, SignalRecord):
        return record.to_dict()
    if isinstance(record, dict):
        return record
    raise SignalValidationError("数据格式错误：记录必须是对象")


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise SignalValidationError(f"数值字段格式错误: {value}")
    return number if math.isfinite(number) else None


def _decode_reason(raw: Optional[str]) -> List[str]:
    try:
        reason = json.loads(raw or "[]")
    except ValueError:
        logger.warning(f"解析 reason 字段失败: {raw}")
        return []
    return reason if isinstance(reason, list) else []


class DatabaseManager:
    """数据库管理器"""

    def __init__(self, connection_string: str = None):
        """
        初始化数据库连接

        Args:
            connection_string: 数据库连接字符串，默认使用配置文件中的设置
        """
        self.connection_string = connection_string or settings.database.connection_string
        self.engine = None
        self.Session = None
        self._connect()

    def _connect(self):
        """建立数据库连接"""
        try:
            options = {'echo': False}
            if not self.connection_string.startswith("sqlite"):
                options.update(pool_size=10, max_overflow=20, pool_recycle=3600)
            self.engine = create_engine(self.connection_string, **options)
            self.Session = sessionmaker(bind=self.engine)
            logger.info("数据库连接成功")
        except Exception as e:
            logger.error(f"数据库连接失败: {e}")
            raise

    def init_tables(self):
        """初始化数据库表"""
        try:
            Base.metadata.create_all(self.engine)
            logger.info("数据库表初始化完成")
        except Exception as e:
            logger.error(f"数据库表初始化失败: {e}")
            raise

    def get_session(self) -> Session:
        """获取数据库会话"""
        return self.Session()

    # ==================== 信号记录操作 ====================

    def _to_row(self, data: Dict[str, Any]) -> SignalRecordRow:
        """校验单条记录并转换为数据库行"""
        limits = settings.COLUMN_LIMITS

        if not data.get('date') or not data.get('code') or not data.get('name'):
            raise SignalValidationError("数据格式错误：缺少必要字段 (date, code, name)")
        if not isinstance(data.get('sector'), list):
            raise SignalValidationError("数据格式错误：sector 必须是数组")

        try:
            record_date = parse_date(str(data['date']))
        except ValueError:
            raise SignalValidationError(f"无效的日期格式: {data['date']}")

        sector = SECTOR_JOINER.join(str(s) for s in data['sector'] if str(s).strip())
        sector = sector or settings.score.default_sector
        if len(sector) > limits['sector']:
            raise SignalValidationError(f"sector 字符串过长 ({len(sector)} > {limits['sector']})")

        # 评分只由形态和换手率决定，不信任传入的 score/reason
        pattern = SectorPattern.from_value(data.get('sector_pattern'))
        turnover = _optional_float(data.get('turnover'))
        score, reason = score_signal(pattern, turnover)

        return SignalRecordRow(
            date=record_date,
            code=str(data['code'])[:limits['code']],
            name=str(data['name'])[:limits['name']],
            sector=sector,
            sector_pattern=pattern.value if pattern else None,
            turnover=turnover,
            chg=_optional_float(data.get('chg')),
            amount=_optional_float(data.get('amount')),
            debt_ratio=_optional_float(data.get('debt_ratio')),
            score=score,
            reason=json.dumps(reason, ensure_ascii=False),
        )

    @staticmethod
    def _to_record(row: SignalRecordRow) -> SignalRecord:
        pattern = SectorPattern.from_value(row.sector_pattern)
        return SignalRecord(
            date=row.date.strftime("%Y-%m-%d"),
            code=row.code,
            name=row.name,
            sector=[s for s in (row.sector or "").split(SECTOR_JOINER) if s] or [settings.score.default_sector],
            sector_pattern=pattern,
            turnover=row.turnover,
            chg=row.chg,
            amount=row.amount,
            debt_ratio=row.debt_ratio,
            score=row.score,
            reason=_decode_reason(row.reason) or score_signal(pattern, row.turnover)[1],
        )

    def save_signals(self, records: Sequence[Union[SignalRecord, Dict[str, Any]]]) -> int:
        """
        批量保存信号记录，任一记录不合法则整批不保存

        Args:
            records: SignalRecord 或 dict 列表

        Returns:
            保存条数

        Raises:
            SignalValidationError: 数据不合法
        """
        if not isinstance(records, (list, tuple)) or len(records) == 0:
            raise SignalValidationError("数据格式错误：需要非空数组")

        rows = [self._to_row(_as_dict(r)) for r in records]

        session = self.get_session()
        try:
            session.add_all(rows)
            session.commit()
            logger.info(f"保存信号记录 {len(rows)}条")
            return len(rows)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"保存信号记录失败: {e}")
            raise
        finally:
            session.close()

    def get_signals(
        self,
        date_from: Union[str, date, None] = None,
        date_to: Union[str, date, None] = None
    ) -> List[SignalRecord]:
        """
        获取信号记录，按日期倒序

        Args:
            date_from: 开始日期 (含)
            date_to: 结束日期 (含)

        Returns:
            SignalRecord列表
        """
        session = self.get_session()
        try:
            query = session.query(SignalRecordRow)
            if date_from:
                start = date_from if isinstance(date_from, date) else parse_date(date_from)
                query = query.filter(SignalRecordRow.date >= start)
            if date_to:
                end = date_to if isinstance(date_to, date) else parse_date(date_to)
                query = query.filter(SignalRecordRow.date <= end)

            rows = query.order_by(SignalRecordRow.date.desc(), SignalRecordRow.id).all()
            logger.debug(f"查询信号记录 {len(rows)}条")
            return [self._to_record(r) for r in rows]
        finally:
            session.close()

    def clear_signals(self) -> int:
        """清空所有信号记录"""
        session = self.get_session()
        try:
            count = session.query(SignalRecordRow).delete()
            session.commit()
            logger.info(f"清空信号记录 {count}条")
            return count
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"清空信号记录失败: {e}")
            raise
        finally:
            session.close()

    # ==================== 板块截图操作 ====================

    def upsert_screenshot(self, day: str, sector: str, image_data_url: str) -> SectorScreenshot:
        """
        上传/更新某日某板块的分时截图

        Args:
            day: 日期 YYYY-MM-DD
            sector: 板块名称
            image_data_url: 截图 Data URL
        """
        if not day or not sector or not image_data_url:
            raise SignalValidationError("数据格式错误")

        try:
            shot_date = parse_date(day)
        except ValueError:
            raise SignalValidationError(f"无效的日期格式: {day}")
        sector = sector[:settings.COLUMN_LIMITS['screenshot_sector']]

        session = self.get_session()
        try:
            existing = session.query(SectorScreenshotRow).filter(
                SectorScreenshotRow.date == shot_date,
                SectorScreenshotRow.sector == sector
            ).first()

            if existing:
                existing.image_data = image_data_url
            else:
                session.add(SectorScreenshotRow(date=shot_date, sector=sector, image_data=image_data_url))

            session.commit()
            logger.debug(f"保存板块截图: {day} {sector}")
            return SectorScreenshot(date=shot_date.strftime("%Y-%m-%d"), sector=sector, image_data_url=image_data_url)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"保存板块截图失败: {e}")
            raise
        finally:
            session.close()

    def get_screenshots(self, day: str = None, sector: str = None) -> List[SectorScreenshot]:
        """
        获取截图，可按日期/板块筛选

        Args:
            day: 日期 YYYY-MM-DD
            sector: 板块名称
        """
        session = self.get_session()
        try:
            query = session.query(SectorScreenshotRow)
            if day:
                query = query.filter(SectorScreenshotRow.date == parse_date(day))
            if sector:
                query = query.filter(SectorScreenshotRow.sector == sector)

            rows = query.order_by(SectorScreenshotRow.date.desc(), SectorScreenshotRow.id).all()
            return [
                SectorScreenshot(
                    date=r.date.strftime("%Y-%m-%d"),
                    sector=r.sector,
                    image_data_url=r.image_data
                )
                for r in rows
            ]
        finally:
            session.close()

    def close(self):
        """关闭数据库连接"""
        if self.engine:
            self.engine.dispose()
            logger.info("数据库连接已关闭")


# 全局数据库管理器实例
db_manager = None


def get_db_manager() -> DatabaseManager:
    """获取数据库管理器实例"""
    global db_manager
    if db_manager is None:
        db_manager = DatabaseManager()
    return db_manager
