# src/podcapacity/reporters/json_reporter.py
"""
A reporter that prints the estimate as JSON, for scripts and pipelines.
"""

from rich.console import Console

from ..models.capacity import ClusterEstimate
from .base_reporter import BaseReporter


class JSONReporter(BaseReporter):
    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def report(self, result: ClusterEstimate, verbose: bool = False):
        exclude = None if verbose else {"nodes": {"__all__": {"usage": {"pods"}}}}
        self.console.print_json(result.model_dump_json(exclude=exclude))
