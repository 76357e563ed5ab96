# src/podcapacity/collectors/node_collector.py
"""
Lists the cluster nodes and keeps the healthy ones, with their allocatable
CPU, memory and pod count.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from kubernetes_asyncio.client.rest import ApiException

from ..core.exceptions import ClusterQueryError
from ..models.capacity import NodeCapacitySnapshot, NodeCondition, SkippedNode
from ..models.settings import EstimationSettings
from ..utils.k8s_utils import parse_cpu, parse_memory, parse_pod_count
from .base_collector import BaseCollector

logger = logging.getLogger(__name__)

READY_CONDITION = "Ready"


def extract_conditions(node) -> Dict[str, NodeCondition]:
    status = getattr(node, "status", None)
    conditions = {}
    for condition in getattr(status, "conditions", None) or []:
        conditions[condition.type] = NodeCondition(
            type=condition.type,
            status=condition.status,
            reason=getattr(condition, "reason", None),
        )
    return conditions


def unhealthy_reason(conditions: Dict[str, NodeCondition], tracked: Iterable[str]) -> Optional[str]:
    """
    Returns why a node is unhealthy, or None when every tracked condition is fine.

    Pressure conditions report "True" while the problem is present, so they
    must be "False". Ready is the inverse and must be "True". A tracked
    condition the node does not report counts as unhealthy.
    """
    for condition_type in tracked:
        condition = conditions.get(condition_type)
        if condition is None:
            return f"condition {condition_type} not reported"
        expected = "True" if condition_type == READY_CONDITION else "False"
        if condition.status != expected:
            return f"condition {condition_type} is {condition.status}"
    return None


def is_node_healthy(conditions: Dict[str, NodeCondition], tracked: Iterable[str]) -> bool:
    return unhealthy_reason(conditions, tracked) is None


def matches_worker_label(labels: Dict[str, str], selector: Optional[Tuple[str, Optional[str]]]) -> bool:
    """A None selector accepts every node."""
    if selector is None:
        return True
    key, value = selector
    if key not in labels:
        return False
    return value is None or labels[key] == value


def snapshot_from_node(node, conditions: Optional[Dict[str, NodeCondition]] = None) -> NodeCapacitySnapshot:
    """Builds a NodeCapacitySnapshot from a V1Node's allocatable resources."""
    status = getattr(node, "status", None)
    allocatable = getattr(status, "allocatable", None) or {}
    return NodeCapacitySnapshot(
        name=node.metadata.name,
        allocatable_cpu=parse_cpu(allocatable.get("cpu")),
        allocatable_memory=parse_memory(allocatable.get("memory")),
        allocatable_pods=parse_pod_count(allocatable.get("pods")),
        labels=node.metadata.labels or {},
        conditions=conditions if conditions is not None else extract_conditions(node),
    )


def filter_healthy(
    nodes: Iterable, settings: EstimationSettings
) -> Tuple[List[NodeCapacitySnapshot], List[SkippedNode]]:
    """
    Splits raw node records into usable snapshots and skipped nodes.
    Order of the input is preserved in both lists.
    """
    healthy: List[NodeCapacitySnapshot] = []
    skipped: List[SkippedNode] = []
    selector = settings.worker_label_selector

    for node in nodes:
        node_name = node.metadata.name
        labels = node.metadata.labels or {}

        if not matches_worker_label(labels, selector):
            logger.debug("Node '%s' does not carry worker label '%s'; skipping.", node_name, settings.worker_label)
            skipped.append(SkippedNode(name=node_name, reason=f"missing label {settings.worker_label}"))
            continue

        conditions = extract_conditions(node)
        reason = unhealthy_reason(conditions, settings.health_conditions)
        if reason:
            logger.warning("Skipping node '%s' as it is not healthy: %s", node_name, reason)
            skipped.append(SkippedNode(name=node_name, reason=reason))
            continue

        snapshot = snapshot_from_node(node, conditions)
        healthy.append(snapshot)
        logger.info(
            " -> Node '%s': cpu=%sm, mem=%s bytes, pods=%s",
            snapshot.name,
            snapshot.allocatable_cpu,
            snapshot.allocatable_memory,
            snapshot.allocatable_pods,
        )

    return healthy, skipped


class NodeCollector(BaseCollector):
    """Collects healthy nodes and their allocatable resources from the Kubernetes cluster."""

    async def collect(self, settings: EstimationSettings) -> Tuple[List[NodeCapacitySnapshot], List[SkippedNode]]:
        """
        Lists every node and applies the worker-label and health filters.

        Raises:
            ClusterQueryError: If the node listing fails.
        """
        try:
            nodes = await self._api.list_node(watch=False)
        except ApiException as e:
            raise ClusterQueryError(f"Kubernetes API error while listing nodes: {e.status} {e.reason}") from e
        except Exception as e:
            raise ClusterQueryError(f"Unexpected error while listing nodes: {e}") from e

        if not nodes.items:
            logger.warning("No nodes found in the cluster.")
            return [], []

        healthy, skipped = filter_healthy(nodes.items, settings)
        logger.info("Found %d healthy node(s) out of %d.", len(healthy), len(nodes.items))
        return healthy, skipped
