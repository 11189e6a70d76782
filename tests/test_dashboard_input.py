# -*- coding: utf-8 -*-
"""
信号录入组件测试 (伪造 streamlit)
"""

from types import SimpleNamespace

import pytest

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fupan.data.storage import DatabaseManager
from fupan.visualization.dashboard.components import tab_input


class FakeStreamlit:
    """只记录截图上传用到的调用"""

    def __init__(self, sector="白酒"):
        self.sector = sector
        self.errors = []
        self.successes = []

    def markdown(self, text):
        pass

    def text_input(self, label, key=None):
        return self.sector

    def file_uploader(self, label, type=None):
        return SimpleNamespace(getvalue=lambda: b"\x89PNG", type="image/png")

    def button(self, label):
        return True

    def success(self, text):
        self.successes.append(text)

    def error(self, text):
        self.errors.append(text)


class TestScreenshotUpload:
    """板块分时截图上传"""

    @pytest.fixture
    def db(self, tmp_path):
        manager = DatabaseManager(f"sqlite:///{tmp_path / 'shots.db'}")
        manager.init_tables()
        yield manager
        manager.close()

    def test_upload_saves_data_url(self, db, monkeypatch):
        fake = FakeStreamlit()
        monkeypatch.setattr(tab_input, 'st', fake)

        tab_input._render_screenshot_upload(db, "2024-06-03")

        assert fake.errors == []
        assert len(fake.successes) == 1
        shots = db.get_screenshots(day="2024-06-03")
        assert shots[0].image_data_url == "data:image/png;base64,iVBORw=="

    def test_invalid_date_shows_error(self, db, monkeypatch):
        fake = FakeStreamlit()
        monkeypatch.setattr(tab_input, 'st', fake)

        tab_input._render_screenshot_upload(db, "昨天")

        assert fake.successes == []
        assert "无效的日期格式" in fake.errors[0]
        assert db.get_screenshots() == []
