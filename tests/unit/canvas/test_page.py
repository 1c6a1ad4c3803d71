"""Unit tests for canvas.page module."""

import logging
from unittest.mock import Mock

import pytest

from canvas_pages.canvas.codec import escaped_string_to_json
from canvas_pages.canvas.config import CanvasConfig
from canvas_pages.canvas.controls import CanvasColumn, ClientSideText, ClientSideWebpart
from canvas_pages.canvas.errors import CodecError, MalformedMarkupError
from canvas_pages.canvas.models import PageLayoutType
from canvas_pages.canvas.page import CONTROL_BOUNDARY, ClientSidePage, reindex
from canvas_pages.canvas.scanner import get_attr_value, get_bounded_div_markup
from canvas_pages.canvas.section import CanvasSection
from canvas_pages.page_operations.models import CreateResult, PageContent, UpdateResult
from tests.fixtures.sample_canvas import (
    SAMPLE_CANVAS_HELLO,
    SAMPLE_CANVAS_OUT_OF_ORDER,
    SAMPLE_CANVAS_TWO_SECTIONS,
    SAMPLE_CANVAS_UNKNOWN_CONTROL,
    SAMPLE_CANVAS_UNTERMINATED,
    TEXT_CONTROL_ID,
    WEBPART_INSTANCE_ID,
)

PAGE_REF = "/sites/dev/SitePages/home.aspx"


def positions(markup):
    """Decoded position metadata of every control in rendered markup."""
    blocks = get_bounded_div_markup(markup, CONTROL_BOUNDARY, lambda b: b)
    return [
        escaped_string_to_json(get_attr_value(b, "data-sp-controldata"))["position"]
        for b in blocks
    ]


@pytest.fixture
def mock_store():
    store = Mock()
    store.fetch_page_content.return_value = PageContent(
        markup=SAMPLE_CANVAS_HELLO, comments_disabled=True
    )
    store.write_page_content.return_value = UpdateResult(
        success=True, page_ref=PAGE_REF, fields=["CanvasContent1"], etag='"2"'
    )
    store.set_comments_disabled.side_effect = lambda ref, disabled: UpdateResult(
        success=True, page_ref=ref, fields=["CommentsDisabled"]
    )
    return store


class TestReindex:
    """Test cases for reindex function."""

    def test_assigns_positional_orders_and_parents(self):
        section = CanvasSection(order=7)
        column = CanvasColumn(order=4)
        text = ClientSideText("a")
        text.order = 9
        # appended directly, bypassing add_control
        column.controls.append(text)
        section.columns.append(column)

        reindex([CanvasSection(order=5), section])

        assert section.order == 2
        assert column.order == 1
        assert column.section is section
        assert text.order == 1
        assert text.column is column


class TestParse:
    """Test cases for ClientSidePage.parse."""

    def test_single_text_control(self):
        page = ClientSidePage().parse(SAMPLE_CANVAS_HELLO)

        assert len(page.sections) == 1
        section = page.sections[0]
        assert section.order == 1
        assert len(section.columns) == 1
        column = section.columns[0]
        assert column.order == 1
        assert column.factor == 12
        assert len(column.controls) == 1
        text = column.controls[0]
        assert isinstance(text, ClientSideText)
        assert text.order == 1
        assert text.text == "<p>Hello</p>"
        assert text.id == TEXT_CONTROL_ID

    def test_two_sections(self):
        page = ClientSidePage().parse(SAMPLE_CANVAS_TWO_SECTIONS)

        assert [s.order for s in page.sections] == [1, 2]
        first, second = page.sections
        assert [(c.order, c.factor) for c in first.columns] == [(1, 6), (2, 6)]
        assert isinstance(first.columns[0].controls[0], ClientSideText)
        assert isinstance(first.columns[1].controls[0], ClientSideWebpart)
        assert len(second.columns) == 1
        assert second.columns[0].controls == []
        assert second.columns[0].factor == 12

    def test_sections_follow_zone_order(self):
        page = ClientSidePage().parse(SAMPLE_CANVAS_OUT_OF_ORDER)

        assert [s.order for s in page.sections] == [1, 2]
        assert [c.id for c in page.sections[0].iter_controls()] == ["b"]
        assert [c.id for c in page.sections[1].iter_controls()] == ["a", "c"]

    def test_sections_belong_to_page(self):
        page = ClientSidePage().parse(SAMPLE_CANVAS_TWO_SECTIONS)
        assert all(s.page is page for s in page.sections)

    def test_replaces_existing_content(self):
        page = ClientSidePage()
        page.add_section().add_control(ClientSideText("old"))

        page.parse(SAMPLE_CANVAS_HELLO)

        assert [c.text for c in page.iter_controls()] == ["<p>Hello</p>"]

    def test_empty_markup_gives_empty_page(self):
        assert ClientSidePage().parse("").sections == []
        assert ClientSidePage().parse(None).sections == []
        assert ClientSidePage().parse("<div></div>").sections == []

    def test_unknown_control_type_is_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="canvas_pages"):
            page = ClientSidePage().parse(SAMPLE_CANVAS_UNKNOWN_CONTROL)

        assert [c.text for c in page.iter_controls()] == ["<p>Hello</p>"]
        assert "unsupported type 14" in caplog.text
        assert page.skipped_controls == 1

    def test_unterminated_markup_raises(self):
        with pytest.raises(MalformedMarkupError):
            ClientSidePage().parse(SAMPLE_CANVAS_UNTERMINATED)

    def test_failed_parse_keeps_existing_tree(self):
        page = ClientSidePage().parse(SAMPLE_CANVAS_TWO_SECTIONS)
        before = page.render()

        with pytest.raises(MalformedMarkupError):
            page.parse(SAMPLE_CANVAS_UNTERMINATED)

        assert len(page.sections) == 2
        assert page.render() == before

    def test_too_deep_markup_raises(self):
        page = ClientSidePage(config=CanvasConfig(max_nesting_depth=3))
        markup = SAMPLE_CANVAS_HELLO.replace(
            "<p>Hello</p>", "<div><div><div>deep</div></div></div>"
        )

        with pytest.raises(MalformedMarkupError):
            page.parse(markup)

    def test_bad_control_data_raises(self):
        markup = '<div><div data-sp-canvascontrol="" data-sp-controldata="&#123;&quot;controlType&quot;&#58;4,"></div></div>'

        with pytest.raises(CodecError):
            ClientSidePage().parse(markup)


class TestRender:
    """Test cases for ClientSidePage.render."""

    def test_empty_page(self):
        assert ClientSidePage().render() == "<div></div>"

    def test_single_text_control(self):
        page = ClientSidePage()
        page.add_section().add_control(ClientSideText("Hello", control_id="abc"))

        assert page.render() == (
            '<div>'
            '<div data-sp-canvascontrol="" data-sp-canvasdataversion="1.0" data-sp-controldata="'
            '&#123;&quot;controlType&quot;&#58;4,&quot;editorType&quot;&#58;&quot;CKEditor&quot;,'
            '&quot;id&quot;&#58;&quot;abc&quot;,&quot;position&quot;&#58;&#123;'
            '&quot;controlIndex&quot;&#58;1,&quot;sectionFactor&quot;&#58;12,'
            '&quot;sectionIndex&quot;&#58;1,&quot;zoneIndex&quot;&#58;1&#125;&#125;">'
            '<div data-sp-rte=""><p>Hello</p></div></div>'
            '</div>'
        )

    def test_positions_follow_tree_shape(self):
        page = ClientSidePage()
        first = page.add_section()
        left, right = first.add_column(6), first.add_column(6)
        left.add_control(ClientSideText("a")).add_control(ClientSideText("b"))
        right.add_control(ClientSideText("c"))
        page.add_section().add_control(ClientSideText("d"))

        assert positions(page.render()) == [
            {"controlIndex": 1, "sectionFactor": 6, "sectionIndex": 1, "zoneIndex": 1},
            {"controlIndex": 2, "sectionFactor": 6, "sectionIndex": 1, "zoneIndex": 1},
            {"controlIndex": 1, "sectionFactor": 6, "sectionIndex": 2, "zoneIndex": 1},
            {"controlIndex": 1, "sectionFactor": 12, "sectionIndex": 1, "zoneIndex": 2},
        ]

    def test_render_reindexes_orders(self):
        page = ClientSidePage()
        section = page.add_section()
        section.order = 10
        text = ClientSideText("a")
        section.add_control(text)
        text.order = 5

        page.render()

        assert section.order == 1
        assert text.order == 1

    def test_removed_section_closes_gap(self):
        page = ClientSidePage()
        for name in ("a", "b", "c"):
            page.add_section().add_control(ClientSideText(name))
        del page.sections[1]

        zones = [p["zoneIndex"] for p in positions(page.render())]

        assert zones == [1, 2]

    def test_empty_column_is_preserved(self):
        page = ClientSidePage()
        section = page.add_section()
        section.add_column(6).add_control(ClientSideText("a"))
        section.add_column(6)

        reparsed = ClientSidePage().parse(page.render())

        columns = reparsed.sections[0].columns
        assert [(c.order, c.factor) for c in columns] == [(1, 6), (2, 6)]
        assert columns[1].controls == []

    def test_uses_page_config(self):
        page = ClientSidePage(config=CanvasConfig(data_version="1.4", text_editor_type="Lexical"))
        page.add_section().add_control(ClientSideText("a"))

        html = page.render()

        assert 'data-sp-canvasdataversion="1.4"' in html
        assert "Lexical" in html


class TestRoundTrip:
    """Parse/render consistency."""

    def test_render_of_parse_is_stable(self):
        once = ClientSidePage().parse(SAMPLE_CANVAS_TWO_SECTIONS).render()
        twice = ClientSidePage().parse(once).render()

        assert once == twice

    def test_parse_of_render_keeps_tree(self):
        page = ClientSidePage()
        section = page.add_section()
        section.add_column(8).add_control(ClientSideText("Left", control_id="l"))
        section.add_column(4).add_control(
            ClientSideWebpart(title="Map", webpart_id="wp", properties={"zoom": 3}, control_id="m")
        )
        page.add_section().add_column(12)

        reparsed = ClientSidePage().parse(page.render())

        assert [[(c.order, c.factor) for c in s.columns] for s in reparsed.sections] == [
            [(1, 8), (2, 4)],
            [(1, 12)],
        ]
        text = reparsed.find_control_by_id("l")
        assert text.text == "<p>Left</p>"
        part = reparsed.find_control_by_id("m")
        assert part.title == "Map"
        assert part.webpart_id == "wp"
        assert part.properties == {"zoom": 3}

    def test_webpart_html_properties_pass_through(self):
        page = ClientSidePage().parse(SAMPLE_CANVAS_TWO_SECTIONS)

        html = page.render()

        assert (
            '<div data-sp-htmlproperties=""><div data-sp-prop-name="embedCode" '
            'data-sp-searchableplaintext="true">https://example.com/video</div></div>'
        ) in html


class TestFind:
    """Test cases for control lookup."""

    def test_iter_controls_in_document_order(self):
        page = ClientSidePage().parse(SAMPLE_CANVAS_OUT_OF_ORDER)
        assert [c.id for c in page.iter_controls()] == ["b", "a", "c"]

    def test_find_control_returns_first_match(self):
        page = ClientSidePage().parse(SAMPLE_CANVAS_OUT_OF_ORDER)

        found = page.find_control(lambda c: isinstance(c, ClientSideText) and "A" in c.text)

        assert found.id == "a"

    def test_find_control_returns_none_without_match(self):
        page = ClientSidePage().parse(SAMPLE_CANVAS_HELLO)
        assert page.find_control(lambda c: False) is None

    def test_find_control_by_id(self):
        page = ClientSidePage().parse(SAMPLE_CANVAS_TWO_SECTIONS)

        assert isinstance(page.find_control_by_id(WEBPART_INSTANCE_ID), ClientSideWebpart)
        assert page.find_control_by_id("missing") is None


class TestStoreOperations:
    """Test cases for load, save and the comments switch."""

    def test_load(self, mock_store):
        page = ClientSidePage(mock_store, PAGE_REF)

        page.load()

        mock_store.fetch_page_content.assert_called_once_with(PAGE_REF)
        assert page.comments_disabled is True
        assert [c.text for c in page.iter_controls()] == ["<p>Hello</p>"]

    def test_from_store_loads(self, mock_store):
        page = ClientSidePage.from_store(mock_store, PAGE_REF)

        assert page.page_ref == PAGE_REF
        assert len(page.sections) == 1

    def test_save_writes_rendered_markup(self, mock_store):
        page = ClientSidePage.from_store(mock_store, PAGE_REF)

        result = page.save()

        mock_store.write_page_content.assert_called_once_with(PAGE_REF, page.render())
        assert result.etag == '"2"'

    def test_save_without_store_raises(self):
        with pytest.raises(ValueError):
            ClientSidePage().save()

    def test_load_without_page_ref_raises(self, mock_store):
        with pytest.raises(ValueError):
            ClientSidePage(mock_store).load()

    def test_disable_and_enable_comments(self, mock_store):
        page = ClientSidePage(mock_store, PAGE_REF)

        page.disable_comments()
        assert page.comments_disabled is True
        page.enable_comments()
        assert page.comments_disabled is False

        assert mock_store.set_comments_disabled.call_args_list[0].args == (PAGE_REF, True)
        assert mock_store.set_comments_disabled.call_args_list[1].args == (PAGE_REF, False)

    def test_create(self, mock_store):
        mock_store.create_page.return_value = CreateResult(
            page_ref="/sites/dev/SitePages/new.aspx",
            library="Site Pages",
            title="New",
            comments_disabled=False,
        )

        page = ClientSidePage.create(mock_store, "Site Pages", "new.aspx", "New", PageLayoutType.HOME)

        mock_store.create_page.assert_called_once_with(
            "Site Pages", "new.aspx", "New", PageLayoutType.HOME
        )
        assert page.page_ref == "/sites/dev/SitePages/new.aspx"
        assert page.sections == []
        assert page.store is mock_store
