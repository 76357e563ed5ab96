# src/podcapacity/collectors/base_collector.py
"""
This module defines the abstract base class for the cluster collectors.
Collectors share one CoreV1Api; whoever created the API owns its lifetime,
unless it was handed over with close_api=True.
"""

from abc import ABC, abstractmethod
from typing import Any

from kubernetes_asyncio import client


class BaseCollector(ABC):
    """
    Abstract Base Class for all cluster collectors.
    """

    def __init__(self, api: client.CoreV1Api, close_api: bool = False):
        self._api = api
        self._close_api = close_api

    @abstractmethod
    async def collect(self, *args, **kwargs) -> Any:
        """
        The main method for a collector. It should query the cluster, parse
        the response, and return Pydantic models.
        """
        pass

    async def close(self):
        """
        Close the Kubernetes API client if this collector owns it.
        """
        if self._api and self._close_api:
            await self._api.api_client.close()
        self._api = None
