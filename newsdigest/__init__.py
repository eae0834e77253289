"""Content summarization, trust classification and news chat service."""

__version__ = "1.0.0"
