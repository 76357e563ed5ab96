# src/podcapacity/cli/__init__.py
"""
podcapacity CLI Package

This package exposes the top-level Typer `app` used by the console
entrypoint and the tests.
"""

from ..reporters.console_reporter import ConsoleReporter
from .main import app

__all__ = ["app", "ConsoleReporter"]
