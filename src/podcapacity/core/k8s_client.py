import logging
import os
import typing

from kubernetes_asyncio import client, config

from .exceptions import ClusterConnectionError

logger = logging.getLogger(__name__)


async def load_api_client(kubeconfig: typing.Optional[str] = None) -> client.ApiClient:
    """
    Builds an ApiClient from the given kubeconfig file, falling back to the
    in-cluster service account when the file does not exist.

    Raises:
        ClusterConnectionError: If no configuration could be loaded.
    """
    configuration = client.Configuration()

    if kubeconfig and os.path.exists(kubeconfig):
        try:
            logger.debug("Loading kubeconfig from %s", kubeconfig)
            await config.load_kube_config(config_file=kubeconfig, client_configuration=configuration)
            logger.info("Loaded Kubernetes configuration from %s.", kubeconfig)
            return client.ApiClient(configuration=configuration)
        except config.ConfigException as e:
            raise ClusterConnectionError(f"Invalid kubeconfig '{kubeconfig}': {e}") from e
        except Exception as e:
            raise ClusterConnectionError(f"Failed to load kubeconfig '{kubeconfig}': {e}") from e

    logger.debug("Kubeconfig '%s' not found; attempting in-cluster config...", kubeconfig)
    try:
        config.load_incluster_config(client_configuration=configuration)
    except config.ConfigException as e:
        raise ClusterConnectionError(
            f"Could not find kubeconfig '{kubeconfig}' and no in-cluster configuration is available."
        ) from e
    logger.info("Loaded in-cluster Kubernetes configuration.")
    return client.ApiClient(configuration=configuration)


async def get_core_v1_api(kubeconfig: typing.Optional[str] = None) -> client.CoreV1Api:
    """Returns a CoreV1Api bound to a freshly loaded configuration."""
    api_client = await load_api_client(kubeconfig)
    return client.CoreV1Api(api_client)
