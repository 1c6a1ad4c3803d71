"""Unit tests for canvas.section module."""

from types import SimpleNamespace

import pytest

from canvas_pages.canvas.config import CanvasConfig
from canvas_pages.canvas.controls import CanvasColumn, ClientSideText
from canvas_pages.canvas.page import ClientSidePage
from canvas_pages.canvas.section import CanvasSection, get_next_order


class TestGetNextOrder:
    """Test cases for get_next_order function."""

    def test_empty_collection(self):
        assert get_next_order([]) == 1

    def test_max_plus_one(self):
        items = [SimpleNamespace(order=3), SimpleNamespace(order=1)]
        assert get_next_order(items) == 4


class TestCanvasSection:
    """Test cases for CanvasSection class."""

    def test_default_column_is_created_full_width(self):
        section = CanvasSection()

        column = section.default_column

        assert section.columns == [column]
        assert column.factor == 12
        assert column.section is section

    def test_default_column_ignores_configured_factor(self):
        page = ClientSidePage(config=CanvasConfig(default_column_factor=6))
        section = page.add_section()

        assert section.default_column.factor == 12

    def test_default_column_is_first_column(self):
        section = CanvasSection()
        first = section.add_column(6)
        section.add_column(6)

        assert section.default_column is first

    def test_add_column_assigns_next_order(self):
        section = CanvasSection()

        orders = [section.add_column(4).order for _ in range(3)]

        assert orders == [1, 2, 3]

    def test_add_column_invalid_factor_raises(self):
        with pytest.raises(ValueError):
            CanvasSection().add_column(3)

    def test_add_control_goes_to_default_column(self):
        section = CanvasSection()
        text = ClientSideText("a")

        result = section.add_control(text)

        assert result is section
        assert section.columns[0].controls == [text]

    def test_constructor_columns_get_back_reference(self):
        column = CanvasColumn()
        section = CanvasSection(columns=[column])
        assert column.section is section

    def test_iter_controls_in_column_order(self):
        section = CanvasSection()
        left = section.add_column(6)
        right = section.add_column(6)
        a, b, c = ClientSideText("a"), ClientSideText("b"), ClientSideText("c")
        right.add_control(c)
        left.add_control(a).add_control(b)

        assert list(section.iter_controls()) == [a, b, c]

    def test_render_with_empty_columns(self):
        section = CanvasSection(order=2)
        section.add_column(6)
        section.add_column(6)

        html = section.render()

        assert html.count("data-sp-canvascontrol") == 2
        assert "sectionIndex&quot;&#58;2" in html
        assert "zoneIndex&quot;&#58;2" in html
