"""Markdown export of page canvases using markdownify.

Text controls are converted from their HTML with markdownify. Web parts
have no markdown form and become HTML comment placeholders naming the
component, so the export shows where they sit on the page.
"""

from markdownify import MarkdownConverter as BaseMarkdownConverter

from ..canvas.controls import CanvasControl, ClientSideText, ClientSideWebpart
from ..canvas.page import ClientSidePage

SECTION_SEPARATOR = "---"


class _CustomMarkdownConverter(BaseMarkdownConverter):
    """markdownify converter with the settings used for page exports."""

    def __init__(self, **options):
        options.setdefault('heading_style', 'atx')  # Use # style headings
        options.setdefault('bullets', '-')  # Use - for bullets
        options.setdefault('strong_em_symbol', '*')  # Use * for bold/italic
        super().__init__(**options)


def _markdownify(html: str, **options) -> str:
    """Convert HTML to markdown using custom converter."""
    return _CustomMarkdownConverter(**options).convert(html)


class MarkdownConverter:
    """Converts page canvases and their controls to markdown."""

    def html_to_markdown(self, html: str) -> str:
        """Convert an HTML fragment to markdown.

        Args:
            html: HTML fragment, e.g. a text control's content

        Returns:
            Markdown text without surrounding blank lines
        """
        if not html:
            return ""
        return _markdownify(html).strip()

    def control_to_markdown(self, control: CanvasControl) -> str:
        if isinstance(control, ClientSideText):
            return self.html_to_markdown(control.text)
        if isinstance(control, ClientSideWebpart):
            return f"<!-- webpart: {control.title} ({control.webpart_id}) -->"
        return ""

    def page_to_markdown(self, page: ClientSidePage) -> str:
        """Convert every section of a page to markdown.

        Sections are separated by horizontal rules; empty columns and
        empty sections produce no output.
        """
        sections = []
        for section in page.sections:
            blocks = [self.control_to_markdown(c) for c in section.iter_controls()]
            blocks = [b for b in blocks if b]
            if blocks:
                sections.append("\n\n".join(blocks))

        if not sections:
            return ""
        return f"\n\n{SECTION_SEPARATOR}\n\n".join(sections) + "\n"
