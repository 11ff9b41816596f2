# src/captionguard/__init__.py
"""Caption generation and 薬機法 compliance review service."""

__version__ = "0.1.0"

__all__ = ["__version__"]
