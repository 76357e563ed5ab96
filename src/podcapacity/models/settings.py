# src/podcapacity/models/settings.py
"""
Run-scoped settings, passed explicitly to every component that needs them.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.config import DEFAULT_HEALTH_CONDITIONS, DEFAULT_MAX_CONCURRENCY, Config


class EstimationSettings(BaseModel):
    """
    Attributes:
        verbose: Report per-pod details and log at DEBUG level
        worker_label: Only consider nodes carrying this label ('key' or 'key=value'); None keeps all nodes
        health_conditions: Node condition types that must be healthy
        strict_pod_errors: Abort on any pod fetch error other than not-found
        max_concurrency: Nodes whose usage is aggregated at the same time
    """

    model_config = ConfigDict(frozen=True)

    verbose: bool = False
    worker_label: Optional[str] = None
    health_conditions: List[str] = Field(default_factory=lambda: list(DEFAULT_HEALTH_CONDITIONS))
    strict_pod_errors: bool = False
    max_concurrency: int = Field(DEFAULT_MAX_CONCURRENCY, ge=1)

    @field_validator("worker_label")
    @classmethod
    def _check_worker_label(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        if value.startswith("="):
            raise ValueError("worker label must be 'key' or 'key=value'")
        return value

    @property
    def worker_label_selector(self) -> Optional[Tuple[str, Optional[str]]]:
        """Returns (key, value) for the worker filter; value is None when only presence is required."""
        if self.worker_label is None:
            return None
        key, sep, value = self.worker_label.partition("=")
        return key, (value if sep else None)

    @classmethod
    def from_config(cls, config: Config, **overrides) -> "EstimationSettings":
        """Builds settings from the environment configuration, letting non-None overrides win."""
        values = {
            "worker_label": config.WORKER_LABEL,
            "health_conditions": config.HEALTH_CONDITIONS,
            "strict_pod_errors": config.STRICT_POD_ERRORS,
            "max_concurrency": config.MAX_CONCURRENCY,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
