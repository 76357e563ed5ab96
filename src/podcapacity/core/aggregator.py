# src/podcapacity/core/aggregator.py
"""
Sums per-node estimates into a cluster-wide total.
"""

from typing import Iterable, List

from ..models.capacity import ClusterEstimate, NodeEstimate, PodSpecRequirements, SkippedNode


def aggregate(estimates: Iterable[NodeEstimate]) -> int:
    """Plain sum of the per-node estimates; every node counts the same."""
    return sum(estimate.replicas for estimate in estimates)


def can_schedule(total: int, requested: int) -> bool:
    return total >= requested


def build_cluster_estimate(
    spec: PodSpecRequirements,
    estimates: Iterable[NodeEstimate],
    skipped_nodes: Iterable[SkippedNode] = (),
) -> ClusterEstimate:
    estimates: List[NodeEstimate] = list(estimates)
    total = aggregate(estimates)
    return ClusterEstimate(
        spec=spec,
        nodes=estimates,
        skipped_nodes=list(skipped_nodes),
        total_replicas=total,
        can_schedule=can_schedule(total, spec.replicas),
    )
