"""tgformat: rich-text formatting engine with Telegram exporters."""

__version__ = "0.1.0"
