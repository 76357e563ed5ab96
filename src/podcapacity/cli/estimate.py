# src/podcapacity/cli/estimate.py
"""
Implements the `estimate` command for the podcapacity CLI.
"""

import asyncio
import logging
import traceback
from typing import List, Optional

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from ..core.config import LEGACY_WORKER_LABEL, config
from ..core.exceptions import PodCapacityError
from ..core.factory import get_planner
from ..models.capacity import ClusterEstimate, PodSpecRequirements
from ..models.settings import EstimationSettings
from ..reporters.console_reporter import ConsoleReporter
from ..reporters.json_reporter import JSONReporter
from ..utils.k8s_utils import parse_cpu, parse_memory

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_UNSCHEDULABLE = 3

OUTPUT_FORMATS = ("table", "json")

app = typer.Typer(help="Estimate the replicas a cluster can still schedule.", add_completion=False)


def parse_replicas(value: str) -> int:
    """Parses the --replicas flag; it must be a non-negative integer."""
    try:
        replicas = int(value.strip())
    except (ValueError, AttributeError):
        raise typer.BadParameter(f"Invalid input for replicas: '{value}'.", param_hint="--replicas")
    if replicas < 0:
        raise typer.BadParameter("Replicas cannot be negative.", param_hint="--replicas")
    return replicas


def parse_conditions(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def build_pod_spec(
    cpu_requests: str, cpu_limits: str, mem_requests: str, mem_limits: str, replicas: str
) -> PodSpecRequirements:
    """
    Turns the raw CLI strings into a PodSpecRequirements.

    Raises:
        typer.BadParameter: If a request is zero or unparsable, or replicas is invalid.
    """
    cpu_request = parse_cpu(cpu_requests)
    if cpu_request <= 0:
        raise typer.BadParameter(f"Invalid CPU request '{cpu_requests}'.", param_hint="--cpuRequests")
    memory_request = parse_memory(mem_requests)
    if memory_request <= 0:
        raise typer.BadParameter(f"Invalid memory request '{mem_requests}'.", param_hint="--memRequests")

    spec = PodSpecRequirements(
        cpu_request=cpu_request,
        cpu_limit=parse_cpu(cpu_limits),
        memory_request=memory_request,
        memory_limit=parse_memory(mem_limits),
        replicas=parse_replicas(replicas),
    )
    if spec.cpu_limit and spec.cpu_limit < spec.cpu_request:
        logger.warning("CPU limit (%sm) is lower than the CPU request (%sm).", spec.cpu_limit, spec.cpu_request)
    if spec.memory_limit and spec.memory_limit < spec.memory_request:
        logger.warning(
            "Memory limit (%s) is lower than the memory request (%s).", spec.memory_limit, spec.memory_request
        )
    return spec


async def run_estimate(
    spec: PodSpecRequirements, kubeconfig: Optional[str], settings: EstimationSettings
) -> ClusterEstimate:
    planner = await get_planner(kubeconfig, settings)
    try:
        return await planner.run(spec)
    finally:
        await planner.close()


@app.callback(invoke_without_command=True)
def estimate(
    ctx: typer.Context,
    cpu_requests: Annotated[
        str,
        typer.Option("--cpuRequests", "--cpu-requests", help="CPU requests either in cores (1) or millicores (250m)."),
    ] = config.DEFAULT_CPU_REQUESTS,
    cpu_limits: Annotated[
        str,
        typer.Option("--cpuLimits", "--cpu-limits", help="CPU limits either in cores (2) or millicores (500m)."),
    ] = config.DEFAULT_CPU_LIMITS,
    mem_requests: Annotated[
        str,
        typer.Option("--memRequests", "--mem-requests", help="Memory requests (e.g. 250mb, 1gb, 512Mi)."),
    ] = config.DEFAULT_MEM_REQUESTS,
    mem_limits: Annotated[
        str,
        typer.Option("--memLimits", "--mem-limits", help="Memory limits (e.g. 500mb, 2gb, 1Gi)."),
    ] = config.DEFAULT_MEM_LIMITS,
    replicas: Annotated[str, typer.Option("--replicas", help="Number of pod replicas.")] = config.DEFAULT_REPLICAS,
    kubeconfig: Annotated[
        Optional[str],
        typer.Option("--kubeconfig", help="Path to the kubeconfig file. Default: $KUBECONFIG or ~/.kube/config."),
    ] = None,
    worker_label: Annotated[
        Optional[str],
        typer.Option(
            "--worker-label",
            help=f"Only use nodes with this label ('key' or 'key=value'), e.g. '{LEGACY_WORKER_LABEL}'.",
        ),
    ] = None,
    conditions: Annotated[
        Optional[str],
        typer.Option("--conditions", help="Comma-separated node conditions that must be healthy."),
    ] = None,
    strict: Annotated[
        Optional[bool],
        typer.Option(
            "--strict/--no-strict",
            help="Abort when a pod cannot be fetched for a reason other than not-found.",
        ),
    ] = None,
    concurrency: Annotated[
        Optional[int],
        typer.Option("--concurrency", min=1, help="Number of nodes processed at the same time."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show per-pod details and debug logs.")] = False,
    output_format: Annotated[
        str,
        typer.Option("--output", help="Output format (table/json).", case_sensitive=False),
    ] = "table",
):
    """
    Estimate how many replicas of a pod the cluster can still schedule.

    Exits with 0 when the requested replicas fit, 3 when they do not,
    1 on cluster errors and 2 on invalid input.
    """
    if ctx.invoked_subcommand is not None:
        return

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    output_format = output_format.lower()
    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"Invalid output format '{output_format}'. Must be 'table' or 'json'.", param_hint="--output"
        )

    spec = build_pod_spec(cpu_requests, cpu_limits, mem_requests, mem_limits, replicas)
    logger.info(
        "Parsed input: cpu requests=%sm limits=%sm, memory requests=%s limits=%s, replicas=%s",
        spec.cpu_request,
        spec.cpu_limit,
        spec.memory_request,
        spec.memory_limit,
        spec.replicas,
    )

    try:
        settings = EstimationSettings.from_config(
            config,
            verbose=verbose,
            worker_label=worker_label,
            health_conditions=parse_conditions(conditions),
            strict_pod_errors=strict,
            max_concurrency=concurrency,
        )
    except ValidationError as e:
        raise typer.BadParameter(str(e))

    try:
        result = asyncio.run(run_estimate(spec, kubeconfig or config.KUBECONFIG, settings))
    except PodCapacityError as e:
        logger.error("Capacity estimate failed: %s", e)
        logger.debug(traceback.format_exc())
        raise typer.Exit(code=EXIT_ERROR)

    reporter = JSONReporter() if output_format == "json" else ConsoleReporter()
    reporter.report(result, verbose=settings.verbose)

    if not result.can_schedule:
        raise typer.Exit(code=EXIT_UNSCHEDULABLE)
