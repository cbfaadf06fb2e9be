"""Tests for the ink palette and its configuration sources."""

import pytest
from PySide6.QtCore import QSettings
from PySide6.QtGui import QColor

from rmrender.errors import ValidationError
from rmrender.model import BrushColor
from rmrender.model.docrender import Palette, color_parse


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_builtin_colors(self):
        palette = Palette.default()
        assert palette.color(BrushColor.BLACK) == QColor(0, 0, 0)
        assert palette.color(BrushColor.GRAY) == QColor(150, 150, 150)
        assert palette.color(BrushColor.WHITE) == QColor(255, 255, 255)
        assert palette.background == QColor(255, 255, 255)
        assert palette.highlighter == QColor(150, 150, 150)

    def test_unmapped_color(self):
        assert Palette.default().color(BrushColor.BLUE) is None

    def test_builtins_survive_custom_mapping(self):
        palette = Palette(colors={BrushColor.BLUE: QColor(0, 0, 255)})
        assert palette.color(BrushColor.BLUE) == QColor(0, 0, 255)
        assert palette.color(BrushColor.BLACK) == QColor(0, 0, 0)

    def test_override_builtin(self):
        palette = Palette(colors={'black': '10,20,30'})
        assert palette.color(BrushColor.BLACK) == QColor(10, 20, 30)

    def test_unknown_keys_ignored(self):
        palette = Palette(colors={'purple': '1,2,3', 42: '1,2,3'})
        assert palette.colors == {}


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestColorParse:
    def test_triplet_string(self):
        assert color_parse('0, 128,255') == QColor(0, 128, 255)

    def test_list(self):
        assert color_parse([1, 2, 3]) == QColor(1, 2, 3)

    def test_hex(self):
        assert color_parse('#ff0000') == QColor(255, 0, 0)

    def test_out_of_range(self):
        with pytest.raises(ValidationError):
            color_parse('0,0,300')

    def test_garbage(self):
        with pytest.raises(ValidationError):
            color_parse('not a color')


# ---------------------------------------------------------------------------
# Configuration sources
# ---------------------------------------------------------------------------


class TestSources:
    def test_from_dict(self):
        palette = Palette.from_dict({
            'background': '#000000',
            'colors': {'red': [255, 0, 0]},
        })
        assert palette.background == QColor(0, 0, 0)
        assert palette.highlighter == QColor(150, 150, 150)
        assert palette.color(BrushColor.RED) == QColor(255, 0, 0)

    def test_from_settings(self, tmp_path):
        settings = QSettings(str(tmp_path / 'rmrender.ini'),
                             QSettings.Format.IniFormat)
        settings.setValue('render/color_blue', '#0000ff')
        settings.setValue('render/highlighter', '#ffff00')
        palette = Palette.from_settings(settings)
        assert palette.color(BrushColor.BLUE) == QColor(0, 0, 255)
        assert palette.highlighter == QColor(255, 255, 0)
        assert palette.background == QColor(255, 255, 255)

    def test_from_empty_settings(self, tmp_path):
        settings = QSettings(str(tmp_path / 'empty.ini'),
                             QSettings.Format.IniFormat)
        palette = Palette.from_settings(settings)
        assert palette.colors == {}
        assert palette.color(BrushColor.BLACK) == QColor(0, 0, 0)
