"""SQL language support for SQL strings embedded in R source code."""

__version__ = "0.1.0"
