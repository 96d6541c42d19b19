"""Zone assignment and validation engine for freight pricing zones."""

__version__ = "0.1.0"
