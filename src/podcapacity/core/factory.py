# src/podcapacity/core/factory.py
"""
Factory functions to instantiate the collectors and the CapacityPlanner.
"""

import logging
from typing import Optional

from ..collectors.node_collector import NodeCollector
from ..collectors.pod_collector import PodCollector
from ..models.settings import EstimationSettings
from .k8s_client import get_core_v1_api
from .planner import CapacityPlanner

logger = logging.getLogger(__name__)


async def get_planner(kubeconfig: Optional[str], settings: EstimationSettings) -> CapacityPlanner:
    """
    Connects to the cluster and returns a planner sharing one CoreV1Api.
    The node collector owns the API and closes it.

    Raises:
        ClusterConnectionError: If the Kubernetes configuration cannot be loaded.
    """
    api = await get_core_v1_api(kubeconfig)
    logger.debug("Kubernetes client ready (concurrency=%d).", settings.max_concurrency)
    return CapacityPlanner(
        node_collector=NodeCollector(api, close_api=True),
        pod_collector=PodCollector(api, strict=settings.strict_pod_errors),
        settings=settings,
    )
