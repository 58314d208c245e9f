"""Editor session for tgformat.

Re-exports the session types for convenience.
"""

from tgformat.core.session import (
    EditorSession,
    ExportResult,
    SessionError,
    SUPPORTED_EXTENSIONS,
)

__all__ = [
    "EditorSession",
    "ExportResult",
    "SessionError",
    "SUPPORTED_EXTENSIONS",
]
