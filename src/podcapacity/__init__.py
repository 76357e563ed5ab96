# src/podcapacity/__init__.py
"""
podcapacity estimates how many additional replicas of a pod a Kubernetes
cluster can schedule, given its current node health and pod requests.
"""

__version__ = "0.1.0"
