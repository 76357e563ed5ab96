# src/podcapacity/reporters/base_reporter.py
"""
Defines the abstract base class for all reporters.
"""
from abc import ABC, abstractmethod

from ..models.capacity import ClusterEstimate


class BaseReporter(ABC):
    """
    Abstract Base Class for all reporters.
    """

    @abstractmethod
    def report(self, result: ClusterEstimate, verbose: bool = False):
        """
        Presents the estimate in a specific format (e.g., console table, JSON).
        """
        pass
