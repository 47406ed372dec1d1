"""pubctl — validate, cross-reference and publish Markdown articles."""

__version__ = "0.1.0"
