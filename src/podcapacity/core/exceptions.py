class PodCapacityError(Exception):
    """Base exception for podcapacity."""

    pass


class ClusterConnectionError(PodCapacityError):
    """Raised when the Kubernetes configuration cannot be loaded."""

    pass


class ClusterQueryError(PodCapacityError):
    """Raised when a query against the cluster fails and the snapshot can no longer be trusted."""

    pass
