"""Export formats for tgformat."""

from tgformat.formats.base import Exporter
from tgformat.formats.html_exporter import HTMLExporter, to_html_dialect
from tgformat.formats.markdown_exporter import MarkdownExporter, to_escaped_markdown
from tgformat.formats.literal_exporter import (
    QuotedLiteralExporter,
    from_quoted_literal,
    to_quoted_literal,
)

__all__ = [
    "Exporter",
    "HTMLExporter",
    "MarkdownExporter",
    "QuotedLiteralExporter",
    "to_html_dialect",
    "to_escaped_markdown",
    "to_quoted_literal",
    "from_quoted_literal",
]

# Map format names to exporters
EXPORTER_MAP: dict[str, type[Exporter]] = {
    "html": HTMLExporter,
    "markdown": MarkdownExporter,
    "literal": QuotedLiteralExporter,
}

SUPPORTED_FORMATS = tuple(EXPORTER_MAP.keys())


def get_exporter(name: str) -> Exporter:
    """Get an exporter instance for a format name."""
    key = name.lower()
    if key not in EXPORTER_MAP:
        raise ValueError(
            f"Unsupported export format: {name}. "
            f"Supported formats: {', '.join(SUPPORTED_FORMATS)}"
        )
    return EXPORTER_MAP[key]()
