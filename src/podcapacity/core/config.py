# src/podcapacity/core/config.py

import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)

# Conditions that report "True" while a problem is present. Ready is the inverse
# and is handled separately by the node health filter.
DEFAULT_HEALTH_CONDITIONS = ["MemoryPressure", "DiskPressure", "PIDPressure", "Ready"]

# Worker role label of clusters that tag their nodes; keeps control-plane nodes out.
LEGACY_WORKER_LABEL = "node-role.kubernetes.io/node=true"

DEFAULT_MAX_CONCURRENCY = 4


def _as_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "t", "y", "yes")


class Config:
    """
    Handles the application's configuration by loading values from environment variables.
    """

    # --- Logging variables ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # --- Target pod defaults (same as the CLI flags) ---
    DEFAULT_CPU_REQUESTS = "100m"
    DEFAULT_CPU_LIMITS = "200m"
    DEFAULT_MEM_REQUESTS = "100mb"
    DEFAULT_MEM_LIMITS = "200mb"
    DEFAULT_REPLICAS = "1"

    # Values below are properties so they are resolved at access time and
    # reflect environment changes made after import.
    @property
    def KUBECONFIG(self) -> str:
        env_value = os.getenv("KUBECONFIG")
        if env_value:
            # KUBECONFIG may hold a path list; the first entry wins.
            return env_value.split(os.pathsep)[0]
        return str(Path.home() / ".kube" / "config")

    @property
    def WORKER_LABEL(self) -> Optional[str]:
        return os.getenv("PODCAPACITY_WORKER_LABEL") or None

    @property
    def HEALTH_CONDITIONS(self) -> List[str]:
        raw = os.getenv("PODCAPACITY_HEALTH_CONDITIONS")
        if not raw:
            return list(DEFAULT_HEALTH_CONDITIONS)
        return [item.strip() for item in raw.split(",") if item.strip()]

    @property
    def STRICT_POD_ERRORS(self) -> bool:
        return _as_bool(os.getenv("PODCAPACITY_STRICT_POD_ERRORS", "False"))

    @property
    def MAX_CONCURRENCY(self) -> int:
        raw = os.getenv("PODCAPACITY_MAX_CONCURRENCY")
        if not raw:
            return DEFAULT_MAX_CONCURRENCY
        try:
            value = int(raw)
        except ValueError:
            value = 0
        if value < 1:
            logging.getLogger(__name__).warning(
                "Invalid PODCAPACITY_MAX_CONCURRENCY '%s' - falling back to %s", raw, DEFAULT_MAX_CONCURRENCY
            )
            return DEFAULT_MAX_CONCURRENCY
        return value

    def validate_instance(self):
        if not self.HEALTH_CONDITIONS:
            logging.getLogger(__name__).warning(
                "PODCAPACITY_HEALTH_CONDITIONS is empty; every node will be treated as healthy."
            )
        label = self.WORKER_LABEL
        if label is not None and label.startswith("="):
            logging.getLogger(__name__).warning(
                "PODCAPACITY_WORKER_LABEL '%s' must be 'key' or 'key=value'; the estimate command will reject it.",
                label,
            )


# Instantiate the config to be imported by other modules
config = Config()
config.validate_instance()
