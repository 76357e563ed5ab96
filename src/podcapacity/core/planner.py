# src/podcapacity/core/planner.py
import asyncio
import logging
from typing import List

from ..collectors.node_collector import NodeCollector
from ..collectors.pod_collector import PodCollector
from ..models.capacity import ClusterEstimate, NodeCapacitySnapshot, NodeEstimate, PodSpecRequirements
from ..models.settings import EstimationSettings
from .aggregator import build_cluster_estimate
from .estimator import estimate_node

logger = logging.getLogger(__name__)


class CapacityPlanner:
    """Orchestrates node collection, usage aggregation and the replica estimate."""

    def __init__(
        self,
        node_collector: NodeCollector,
        pod_collector: PodCollector,
        settings: EstimationSettings,
    ):
        self.node_collector = node_collector
        self.pod_collector = pod_collector
        self.settings = settings

    async def _estimate_nodes(
        self, nodes: List[NodeCapacitySnapshot], spec: PodSpecRequirements
    ) -> List[NodeEstimate]:
        """
        Aggregates usage for every node through a bounded pool of tasks.
        gather() keeps the input order, so results do not depend on which
        node finishes first. The first failure cancels the remaining tasks.
        """
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)

        async def _one(node: NodeCapacitySnapshot) -> NodeEstimate:
            async with semaphore:
                usage = await self.pod_collector.aggregate_usage(node.name)
            return estimate_node(node, usage, spec)

        tasks = [asyncio.ensure_future(_one(node)) for node in nodes]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def run(self, spec: PodSpecRequirements) -> ClusterEstimate:
        """
        Takes one snapshot of the cluster and estimates how many replicas of
        `spec` it can still schedule.

        Raises:
            ClusterQueryError: If listing nodes or pods fails.
        """
        logger.info("--- Starting capacity estimate ---")
        nodes, skipped = await self.node_collector.collect(self.settings)
        if not nodes:
            logger.warning("No healthy nodes to place replicas on.")

        estimates = await self._estimate_nodes(nodes, spec)
        result = build_cluster_estimate(spec, estimates, skipped)
        logger.info(
            "--- Finished capacity estimate: %d replica(s) possible, %d requested ---",
            result.total_replicas,
            spec.replicas,
        )
        return result

    async def close(self):
        await self.pod_collector.close()
        await self.node_collector.close()
