"""
Mail host implementations.
"""

from .eml_host import EmlFileHost, LogNotifier

__all__ = ["EmlFileHost", "LogNotifier"]
