# src/podcapacity/core/estimator.py
"""
Per-node replica estimate.

The bound uses requests only: the scheduler admits pods on their requests,
while limits only matter at runtime. Limits are reported as percentages.
"""

import logging

from ..models.capacity import NodeCapacitySnapshot, NodeEstimate, NodeUsage, PodSpecRequirements

logger = logging.getLogger(__name__)


def _resource_bound(allocatable: int, used: int, request: int) -> int:
    free = allocatable - used
    if free <= 0:
        return 0
    return free // request


def _percent(used: int, allocatable: int) -> float:
    if allocatable <= 0:
        return 0.0
    return used * 100 / allocatable


def estimate_replicas(node: NodeCapacitySnapshot, usage: NodeUsage, cpu_request: int, memory_request: int) -> int:
    """
    Maximum number of additional replicas that fit on the node, never negative.

    When the resource bound reaches the node's pod ceiling, the estimate
    becomes the number of pod slots left on the node.

    Raises:
        ValueError: If a target request is not positive.
    """
    if cpu_request <= 0 or memory_request <= 0:
        raise ValueError("Target CPU and memory requests must be positive.")

    cpu_bound = _resource_bound(node.allocatable_cpu, usage.cpu_request_total, cpu_request)
    memory_bound = _resource_bound(node.allocatable_memory, usage.memory_request_total, memory_request)

    estimate = min(cpu_bound, memory_bound)
    if estimate >= node.allocatable_pods:
        estimate = node.allocatable_pods - usage.pod_count
    return max(estimate, 0)


def estimate_node(node: NodeCapacitySnapshot, usage: NodeUsage, spec: PodSpecRequirements) -> NodeEstimate:
    """Builds the full NodeEstimate, including consumption percentages."""
    replicas = estimate_replicas(node, usage, spec.cpu_request, spec.memory_request)
    result = NodeEstimate(
        node=node,
        usage=usage,
        cpu_bound=_resource_bound(node.allocatable_cpu, usage.cpu_request_total, spec.cpu_request),
        memory_bound=_resource_bound(node.allocatable_memory, usage.memory_request_total, spec.memory_request),
        replicas=replicas,
        cpu_request_percent=_percent(usage.cpu_request_total, node.allocatable_cpu),
        cpu_limit_percent=_percent(usage.cpu_limit_total, node.allocatable_cpu),
        memory_request_percent=_percent(usage.memory_request_total, node.allocatable_memory),
        memory_limit_percent=_percent(usage.memory_limit_total, node.allocatable_memory),
    )
    logger.info(
        "Node '%s': cpu bound=%d, memory bound=%d, pods=%d/%d -> %d replica(s)",
        node.name,
        result.cpu_bound,
        result.memory_bound,
        usage.pod_count,
        node.allocatable_pods,
        replicas,
    )
    return result
