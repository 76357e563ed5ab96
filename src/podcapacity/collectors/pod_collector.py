# src/podcapacity/collectors/pod_collector.py
"""
Sums the resource requests and limits (CPU, memory) of the non-terminal pods
running on a node.
"""

import logging
from typing import Iterable, List

from kubernetes_asyncio.client.rest import ApiException

from ..core.exceptions import ClusterQueryError
from ..models.capacity import NodeUsage, PodResourceUsage
from ..utils.k8s_utils import parse_cpu, parse_memory
from .base_collector import BaseCollector

logger = logging.getLogger(__name__)

# Pods in these phases either do not run yet or no longer hold resources.
EXCLUDED_PHASES = ("Pending", "Succeeded", "Failed", "Unknown")


def non_terminated_pods_selector(node_name: str) -> str:
    """Field selector for the pods scheduled on a node that are actively running."""
    parts = [f"spec.nodeName={node_name}"]
    parts.extend(f"status.phase!={phase}" for phase in EXCLUDED_PHASES)
    return ",".join(parts)


def summarize_pod(pod) -> PodResourceUsage:
    """Sums the requests and limits of every container of a V1Pod."""
    cpu_request = cpu_limit = memory_request = memory_limit = 0

    containers = (pod.spec.containers if pod.spec else None) or []
    for container in containers:
        resources = container.resources
        requests = (resources.requests if resources else None) or {}
        limits = (resources.limits if resources else None) or {}

        cpu_request += parse_cpu(requests.get("cpu"))
        cpu_limit += parse_cpu(limits.get("cpu"))
        memory_request += parse_memory(requests.get("memory"))
        memory_limit += parse_memory(limits.get("memory"))

    return PodResourceUsage(
        name=pod.metadata.name,
        namespace=pod.metadata.namespace,
        cpu_request=cpu_request,
        cpu_limit=cpu_limit,
        memory_request=memory_request,
        memory_limit=memory_limit,
    )


def sum_usage(
    node_name: str,
    pods: Iterable[PodResourceUsage],
    pod_count: int,
    skipped_pods: Iterable[str] = (),
) -> NodeUsage:
    pods = list(pods)
    return NodeUsage(
        node_name=node_name,
        cpu_limit_total=sum(p.cpu_limit for p in pods),
        cpu_request_total=sum(p.cpu_request for p in pods),
        memory_limit_total=sum(p.memory_limit for p in pods),
        memory_request_total=sum(p.memory_request for p in pods),
        pod_count=pod_count,
        pods=pods,
        skipped_pods=list(skipped_pods),
    )


class PodCollector(BaseCollector):
    """
    Connects to the K8s API to find the resource requests and limits of
    every container of every non-terminal pod on a node.
    """

    def __init__(self, api, strict: bool = False, close_api: bool = False):
        super().__init__(api, close_api=close_api)
        self.strict = strict

    async def collect(self, node_name: str) -> NodeUsage:
        return await self.aggregate_usage(node_name)

    async def aggregate_usage(self, node_name: str) -> NodeUsage:
        """
        Lists the node's non-terminal pods, fetches each one and sums their
        container resources.

        A pod deleted between listing and fetching is skipped. Other fetch
        errors are skipped too, unless the collector is strict.

        Raises:
            ClusterQueryError: If the pod listing fails, or on a fetch error in strict mode.
        """
        selector = non_terminated_pods_selector(node_name)
        try:
            pod_list = await self._api.list_pod_for_all_namespaces(field_selector=selector, watch=False)
        except ApiException as e:
            raise ClusterQueryError(
                f"Kubernetes API error while listing pods on node '{node_name}': {e.status} {e.reason}"
            ) from e
        except Exception as e:
            raise ClusterQueryError(f"Unexpected error while listing pods on node '{node_name}': {e}") from e

        listed = [(pod.metadata.namespace, pod.metadata.name) for pod in pod_list.items]
        logger.debug("Node '%s' has %d non-terminated pod(s).", node_name, len(listed))

        usages: List[PodResourceUsage] = []
        skipped: List[str] = []
        for namespace, name in listed:
            try:
                pod = await self._api.read_namespaced_pod(name=name, namespace=namespace)
            except ApiException as e:
                if e.status == 404:
                    logger.warning("Pod %s in namespace %s not found; skipping.", name, namespace)
                    skipped.append(f"{namespace}/{name}")
                    continue
                if self.strict:
                    raise ClusterQueryError(
                        f"Error getting pod {name} in namespace {namespace}: {e.status} {e.reason}"
                    ) from e
                logger.warning(
                    "Error getting pod %s in namespace %s: %s %s; skipping.", name, namespace, e.status, e.reason
                )
                skipped.append(f"{namespace}/{name}")
                continue
            except Exception as e:
                if self.strict:
                    raise ClusterQueryError(f"Unexpected error getting pod {name} in namespace {namespace}: {e}") from e
                logger.warning("Unexpected error getting pod %s in namespace %s: %s; skipping.", name, namespace, e)
                skipped.append(f"{namespace}/{name}")
                continue

            usage = summarize_pod(pod)
            logger.debug(
                "Pod %s/%s: cpu req=%sm lim=%sm, mem req=%s lim=%s",
                namespace,
                name,
                usage.cpu_request,
                usage.cpu_limit,
                usage.memory_request,
                usage.memory_limit,
            )
            usages.append(usage)

        return sum_usage(node_name, usages, pod_count=len(listed), skipped_pods=skipped)
