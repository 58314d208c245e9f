"""Quoted string-literal exporter.

Takes the HTML dialect output and encodes it as a chain of single-quoted
string literals joined by ``+``, one ``'\\n'`` literal per newline. The
result can be pasted into a calculator-style expression field:

    'line one' + '\\n' + 'line two'
"""

import re

from tgformat.formats.base import Exporter
from tgformat.formats.html_exporter import to_html_dialect
from tgformat.formatting.ir import Container

QUOTE = "'"
CONCAT = "' + '"
NEWLINE_TOKEN = "\\n"

_NEWLINE_RUN = re.compile(r"\n+")
_ESCAPE = re.compile(r"\\(.)")


def _encode_run(match: re.Match) -> str:
    return CONCAT + CONCAT.join([NEWLINE_TOKEN] * len(match.group(0))) + CONCAT


def encode_literal(value: str) -> str:
    """Encode a string as a quoted literal chain.

    Backslashes are doubled first so that the encoding can be reversed.
    """
    escaped = value.replace("\\", "\\\\")
    return QUOTE + _NEWLINE_RUN.sub(_encode_run, escaped) + QUOTE


def from_quoted_literal(literal: str) -> str:
    """Decode a literal chain produced from HTML dialect output.

    Raises:
        ValueError: If literal is not wrapped in single quotes
    """
    if len(literal) < 2 or not (literal.startswith(QUOTE) and literal.endswith(QUOTE)):
        raise ValueError(f"Not a quoted literal: {literal[:40]!r}")
    tokens = literal[1:-1].split(CONCAT)
    return "".join(
        _ESCAPE.sub(lambda m: "\n" if m.group(1) == "n" else m.group(1), token)
        for token in tokens
    )


def to_quoted_literal(root: Container) -> str:
    """Serialize root as HTML dialect, then encode it as a literal chain."""
    return encode_literal(to_html_dialect(root))


class QuotedLiteralExporter(Exporter):
    """Exporter for the calculator string-literal format."""

    @property
    def name(self) -> str:
        return "literal"

    @property
    def action(self) -> str:
        return "Export to Calculator"

    @property
    def extension(self) -> str:
        return ".txt"

    def export(self, root: Container) -> str:
        return to_quoted_literal(root)
