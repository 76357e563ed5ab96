# tests/conftest.py

import pytest
from kubernetes_asyncio.client import models as k8s

from podcapacity.models.capacity import NodeCapacitySnapshot, NodeUsage, PodSpecRequirements

GIB = 1024**3
MIB = 1024**2


@pytest.fixture(autouse=True)
def mock_settings_env_vars(monkeypatch):
    """
    Autouse fixture that removes podcapacity environment variables so the
    configuration is predictable and isolated from the actual environment.
    """
    for key in (
        "PODCAPACITY_WORKER_LABEL",
        "PODCAPACITY_HEALTH_CONDITIONS",
        "PODCAPACITY_STRICT_POD_ERRORS",
        "PODCAPACITY_MAX_CONCURRENCY",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("KUBECONFIG", "/nonexistent/kubeconfig")


def make_node(name, cpu="2", memory="2Gi", pods="10", labels=None, conditions=None):
    """Builds a V1Node with allocatable resources and conditions.

    `conditions` maps condition type to status; by default the node is healthy.
    """
    if conditions is None:
        conditions = {"MemoryPressure": "False", "DiskPressure": "False", "PIDPressure": "False", "Ready": "True"}
    return k8s.V1Node(
        metadata=k8s.V1ObjectMeta(name=name, labels=labels or {}),
        status=k8s.V1NodeStatus(
            allocatable={"cpu": cpu, "memory": memory, "pods": pods},
            conditions=[k8s.V1NodeCondition(type=t, status=s) for t, s in conditions.items()],
        ),
    )


def make_pod(name, namespace="default", containers=None):
    """Builds a V1Pod; `containers` is a list of (requests, limits) tuples."""
    specs = []
    for index, (requests, limits) in enumerate(containers or []):
        specs.append(
            k8s.V1Container(
                name=f"c{index}",
                resources=k8s.V1ResourceRequirements(requests=requests, limits=limits),
            )
        )
    return k8s.V1Pod(
        metadata=k8s.V1ObjectMeta(name=name, namespace=namespace),
        spec=k8s.V1PodSpec(containers=specs),
    )


@pytest.fixture
def scenario_node():
    """Node with 2000m CPU, 2GiB memory and room for 10 pods."""
    return NodeCapacitySnapshot(name="node-a", allocatable_cpu=2000, allocatable_memory=2 * GIB, allocatable_pods=10)


@pytest.fixture
def empty_usage():
    return NodeUsage(node_name="node-a")


@pytest.fixture
def target_spec():
    """Target pod requesting 250m CPU and 250MiB memory."""
    return PodSpecRequirements(cpu_request=250, cpu_limit=500, memory_request=250 * MIB, memory_limit=500 * MIB)


@pytest.fixture
def node_factory():
    return make_node


@pytest.fixture
def pod_factory():
    return make_pod
