from __future__ import annotations

import logging
import mimetypes
from typing import Optional

from azure.core.exceptions import ResourceExistsError
from azure.storage.blob import ContentSettings

from csm_publish.domain.models import PackagedFile, StorageClients

logger = logging.getLogger("uploader")


def _content_type_for(file_name: str) -> str:
    ct, _ = mimetypes.guess_type(file_name)
    return ct or "application/octet-stream"


def _log_progress(current: int, total: Optional[int]) -> None:
    logger.info("upload_progress", extra={"loaded_bytes": current, "total_bytes": total})


def ensure_container(clients: StorageClients) -> None:
    """Create the container if it is missing. Any failure other than 'already exists' propagates."""
    try:
        clients.container_client.create_container()
        logger.info("container_created", extra={"container": clients.container_name})
    except ResourceExistsError:
        logger.debug("container_exists", extra={"container": clients.container_name})


def upload_file(clients: StorageClients, packaged: PackagedFile) -> None:
    """
    Push the packaged file to clients.blob_path, replacing whatever was there.

    Network and auth errors from the SDK propagate untouched; no retry.
    """
    ensure_container(clients)
    logger.info(
        "Uploading %s to %s/%s",
        packaged.file_path,
        clients.container_name,
        clients.blob_path,
    )
    with open(packaged.file_path, "rb") as f:
        clients.blob_client.upload_blob(
            f,
            overwrite=True,
            content_settings=ContentSettings(content_type=_content_type_for(packaged.file_name)),
            progress_hook=_log_progress,
        )
    logger.info("upload_complete", extra={"container": clients.container_name, "blob_path": clients.blob_path})
