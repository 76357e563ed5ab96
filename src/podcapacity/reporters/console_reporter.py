# src/podcapacity/reporters/console_reporter.py
"""
A reporter that displays the estimate in formatted tables in the console.
"""

import logging

from rich.console import Console
from rich.table import Table

from ..models.capacity import ClusterEstimate
from .base_reporter import BaseReporter

logger = logging.getLogger(__name__)

MIB = 1024 * 1024


def _mib(value: int) -> str:
    return f"{value / MIB:.1f}"


class ConsoleReporter(BaseReporter):
    """
    Renders the capacity estimate to the console using the 'rich' library.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def report(self, result: ClusterEstimate, verbose: bool = False):
        spec = result.spec
        self.console.print(
            f"Target pod: CPU req/lim {spec.cpu_request}m/{spec.cpu_limit}m, "
            f"Mem req/lim {_mib(spec.memory_request)}/{_mib(spec.memory_limit)} Mi, "
            f"replicas {spec.replicas}",
            style="bold",
        )

        if not result.nodes:
            self.console.print("No healthy nodes found.", style="yellow")
        else:
            self._report_nodes(result)

        if result.skipped_nodes:
            self._report_skipped(result)

        if verbose:
            self._report_pods(result)

        self._report_summary(result)

    def _report_nodes(self, result: ClusterEstimate):
        table = Table(
            title="Node Capacity Estimate",
            header_style="bold magenta",
            show_lines=True,
        )
        table.add_column("Node", style="cyan")
        table.add_column("Pods", justify="right")
        table.add_column("Alloc CPU (m)", style="blue", justify="right")
        table.add_column("Alloc Mem (Mi)", style="blue", justify="right")
        table.add_column("CPU Req %", style="green", justify="right")
        table.add_column("CPU Lim %", style="dim", justify="right")
        table.add_column("Mem Req %", style="green", justify="right")
        table.add_column("Mem Lim %", style="dim", justify="right")
        table.add_column("CPU Bound", justify="right")
        table.add_column("Mem Bound", justify="right")
        table.add_column("Replicas", style="bold yellow", justify="right")

        for item in result.nodes:
            node, usage = item.node, item.usage
            table.add_row(
                node.name,
                f"{usage.pod_count}/{node.allocatable_pods}",
                f"{node.allocatable_cpu}",
                _mib(node.allocatable_memory),
                f"{item.cpu_request_percent:.2f}",
                f"{item.cpu_limit_percent:.2f}",
                f"{item.memory_request_percent:.2f}",
                f"{item.memory_limit_percent:.2f}",
                f"{item.cpu_bound}",
                f"{item.memory_bound}",
                f"{item.replicas}",
            )

        self.console.print(table)

    def _report_skipped(self, result: ClusterEstimate):
        self.console.print("Skipped nodes:", style="yellow")
        for skipped in result.skipped_nodes:
            self.console.print(f"  - {skipped.name}: {skipped.reason}", style="yellow")

    def _report_pods(self, result: ClusterEstimate):
        table = Table(
            title="Pod Resources by Node",
            header_style="bold magenta",
        )
        table.add_column("Node", style="cyan")
        table.add_column("Namespace", style="cyan")
        table.add_column("Pod Name", style="cyan")
        table.add_column("CPU Req (m)", style="blue", justify="right")
        table.add_column("CPU Lim (m)", style="blue", justify="right")
        table.add_column("Mem Req (Mi)", style="blue", justify="right")
        table.add_column("Mem Lim (Mi)", style="blue", justify="right")

        for item in result.nodes:
            for pod in item.usage.pods:
                table.add_row(
                    item.node.name,
                    pod.namespace,
                    pod.name,
                    f"{pod.cpu_request}",
                    f"{pod.cpu_limit}",
                    _mib(pod.memory_request),
                    _mib(pod.memory_limit),
                )
            for skipped in item.usage.skipped_pods:
                namespace, _, name = skipped.partition("/")
                table.add_row(item.node.name, namespace, f"[yellow]{name} (skipped)[/]", "-", "-", "-", "-")

        self.console.print(table)

    def _report_summary(self, result: ClusterEstimate):
        requested = result.requested_replicas
        self.console.print(
            f"\nTotal possible replicas for the pod with the requested specs: {result.total_replicas}",
            style="bold",
        )
        if result.can_schedule:
            self.console.print(
                f"✅ You can go ahead with the deployment of {requested} pod replica(s) in the cluster.",
                style="green",
            )
        else:
            self.console.print(
                f"❌ The cluster cannot schedule {requested} replica(s). "
                "Try again with fewer replicas or smaller CPU/memory requests.",
                style="bold red",
            )
