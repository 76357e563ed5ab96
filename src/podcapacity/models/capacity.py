# src/podcapacity/models/capacity.py
"""
This module defines the Pydantic data models used along the estimation
pipeline. Every model is frozen: a snapshot taken from the cluster is never
modified after construction, and derived values are new objects.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class PodSpecRequirements(BaseModel):
    """
    The target pod whose replicas we want to place.

    CPU values are in millicores, memory values in bytes.
    """

    model_config = ConfigDict(frozen=True)

    cpu_request: int = Field(..., gt=0, description="CPU request in millicores.")
    cpu_limit: int = Field(0, ge=0, description="CPU limit in millicores.")
    memory_request: int = Field(..., gt=0, description="Memory request in bytes.")
    memory_limit: int = Field(0, ge=0, description="Memory limit in bytes.")
    replicas: int = Field(1, ge=0, description="Number of replicas to schedule.")


class NodeCondition(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    status: str
    reason: Optional[str] = None


class NodeCapacitySnapshot(BaseModel):
    """
    Allocatable resources of a healthy node at the time of the query.

    Attributes:
        name: Node name
        allocatable_cpu: Allocatable CPU in millicores
        allocatable_memory: Allocatable memory in bytes
        allocatable_pods: Maximum number of pods the kubelet accepts
        labels: Node labels
        conditions: Reported conditions, keyed by type
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Node name")
    allocatable_cpu: int = Field(0, ge=0, description="Allocatable CPU in millicores")
    allocatable_memory: int = Field(0, ge=0, description="Allocatable memory in bytes")
    allocatable_pods: int = Field(0, ge=0, description="Allocatable pod count")
    labels: Dict[str, str] = Field(default_factory=dict, description="Node labels")
    conditions: Dict[str, NodeCondition] = Field(default_factory=dict, description="Node conditions by type")


class SkippedNode(BaseModel):
    """A node left out of the estimate, with the reason why."""

    model_config = ConfigDict(frozen=True)

    name: str
    reason: str


class PodResourceUsage(BaseModel):
    """
    Resource requests and limits of one pod, summed across its containers.
    A container without a value contributes zero for that dimension.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="The name of the Kubernetes pod.")
    namespace: str = Field(..., description="The namespace the pod belongs to.")
    cpu_request: int = Field(0, ge=0, description="CPU requests in millicores.")
    cpu_limit: int = Field(0, ge=0, description="CPU limits in millicores.")
    memory_request: int = Field(0, ge=0, description="Memory requests in bytes.")
    memory_limit: int = Field(0, ge=0, description="Memory limits in bytes.")


class NodeUsage(BaseModel):
    """Resources consumed on a node by its non-terminal pods."""

    model_config = ConfigDict(frozen=True)

    node_name: str
    cpu_limit_total: int = 0
    cpu_request_total: int = 0
    memory_limit_total: int = 0
    memory_request_total: int = 0
    pod_count: int = Field(0, ge=0, description="Non-terminal pods listed on the node.")
    pods: List[PodResourceUsage] = Field(default_factory=list)
    skipped_pods: List[str] = Field(default_factory=list, description="'namespace/name' of pods not accounted for.")


class NodeEstimate(BaseModel):
    """Replica estimate for a single node, with the figures that produced it."""

    model_config = ConfigDict(frozen=True)

    node: NodeCapacitySnapshot
    usage: NodeUsage
    cpu_bound: int = Field(..., ge=0)
    memory_bound: int = Field(..., ge=0)
    replicas: int = Field(..., ge=0, description="Additional replicas that fit on this node.")
    cpu_request_percent: float = 0.0
    cpu_limit_percent: float = 0.0
    memory_request_percent: float = 0.0
    memory_limit_percent: float = 0.0

    @property
    def name(self) -> str:
        return self.node.name


class ClusterEstimate(BaseModel):
    """Cluster-wide result of a single run."""

    model_config = ConfigDict(frozen=True)

    spec: PodSpecRequirements
    nodes: List[NodeEstimate] = Field(default_factory=list)
    skipped_nodes: List[SkippedNode] = Field(default_factory=list)
    total_replicas: int = Field(0, ge=0)
    can_schedule: bool = False

    @field_validator("nodes")
    @classmethod
    def _unique_node_names(cls, nodes: List[NodeEstimate]) -> List[NodeEstimate]:
        names = [estimate.node.name for estimate in nodes]
        if len(names) != len(set(names)):
            raise ValueError("Node estimates must have unique node names.")
        return nodes

    @computed_field
    @property
    def requested_replicas(self) -> int:
        return self.spec.replicas
