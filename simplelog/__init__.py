"""Levelled JSON logging, a structured logger and a coloured console handler."""

__version__ = "0.1.0"
__all__ = ["core", "loggers", "prettylog", "medlog"]