from __future__ import annotations

import logging
from typing import Tuple

from azure.storage.blob import BlobServiceClient

from csm_publish.domain.models import StorageClients
from csm_publish.errors import ConfigurationError

logger = logging.getLogger("storage_clients")


def _clean_path(p: str) -> str:
    """
    Normalize a blob path:
    - forward slashes only, no leading slash
    - drop empty, '.' and '..' segments
    """
    s = (p or "").strip().replace("\\", "/")
    segments = [seg for seg in s.split("/") if seg and seg not in (".", "..")]
    return "/".join(segments)


def split_container_blob_prefix(container_blob_prefix: str) -> Tuple[str, str]:
    """
    "mycontainer/a/b" -> ("mycontainer", "a/b")
    "mycontainer"     -> ("mycontainer", "")
    """
    logger.debug("Splitting %s", container_blob_prefix)
    container, _, prefix = (container_blob_prefix or "").strip().lstrip("/").partition("/")
    container = container.strip()
    prefix = _clean_path(prefix)
    if not container:
        raise ConfigurationError(
            f"AZURE_STORAGE_CONTAINER_BLOB_PREFIX has no container name: {container_blob_prefix!r}"
        )
    logger.debug("Container: %s", container)
    logger.debug("Blob prefix: %s", prefix)
    return container, prefix


def build_blob_path(blob_prefix: str, blob_name: str) -> str:
    # Only the configured prefix is normalized; the file name is a single
    # local entry and keeps its exact bytes, backslashes included
    prefix = _clean_path(blob_prefix)
    name = (blob_name or "").lstrip("/")
    return f"{prefix}/{name}" if prefix and name else name


def create_storage_clients(connection_string: str, container_blob_prefix: str, blob_name: str) -> StorageClients:
    """
    Resolve service, container and blob clients for one upload.

    The connection string is the source of truth for endpoint and account;
    a string the SDK cannot parse is a configuration error, not retried.
    """
    logger.info("Creating Azure clients")
    container_name, blob_prefix = split_container_blob_prefix(container_blob_prefix)
    blob_path = build_blob_path(blob_prefix, blob_name)
    if not blob_path:
        raise ConfigurationError(f"invalid blob name: {blob_name!r}")
    logger.debug("blob path: %s", blob_path)

    try:
        blob_service_client = BlobServiceClient.from_connection_string(connection_string)
    except ValueError as e:
        raise ConfigurationError(f"AZURE_STORAGE_CONNECTION_STRING is invalid: {e}") from e

    container_client = blob_service_client.get_container_client(container_name)
    blob_client = container_client.get_blob_client(blob_path)

    return StorageClients(
        blob_service_client=blob_service_client,
        container_client=container_client,
        blob_client=blob_client,
        container_name=container_name,
        blob_path=blob_path,
    )
