from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from csm_publish.config import Settings, load_settings
from csm_publish.errors import EmptyInputError, OutputWriteError
from csm_publish.logging import configure_logging
from csm_publish.services.connection_string import parse_connection_string, require_account_credentials
from csm_publish.services.packager import package_directory
from csm_publish.services.sas_service import issue_sas_url
from csm_publish.services.storage_clients import create_storage_clients
from csm_publish.services.uploader import upload_file

logger = logging.getLogger("csm_publish")

URL_FILE_MODE = 0o644


def write_url_file(path: str | Path, url: str) -> Path:
    """
    Replace `path` with a single line holding `url`.

    Written to a sibling temp file and renamed over the target, so readers
    see either the previous content or the new URL, never a partial write.
    """
    path = Path(path)
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(url + "\n")
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates 0600; readers of the URL file are often other users
        os.chmod(tmp_name, URL_FILE_MODE)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise OutputWriteError(f"could not write SAS file {path}: {e}") from e
    return path


async def publish(settings: Settings) -> str:
    """
    Package -> upload -> sign -> persist. Returns the signed URL.

    Packaging and connection string parsing are independent and run together;
    every later stage needs the previous one's result.
    """
    file_info, cs_infos = await asyncio.gather(
        asyncio.to_thread(package_directory, settings.CSM_DATA_ABSOLUTE_PATH, settings.CSM_OUTPUT_ZIP_FILE),
        asyncio.to_thread(parse_connection_string, settings.AZURE_STORAGE_CONNECTION_STRING),
    )
    if file_info is None:
        raise EmptyInputError(f"No files in {settings.CSM_DATA_ABSOLUTE_PATH}")

    require_account_credentials(cs_infos)

    clients = create_storage_clients(
        settings.AZURE_STORAGE_CONNECTION_STRING,
        settings.AZURE_STORAGE_CONTAINER_BLOB_PREFIX,
        file_info.file_name,
    )
    await asyncio.to_thread(upload_file, clients, file_info)

    sas_url = issue_sas_url(
        clients,
        cs_infos,
        ttl_minutes=settings.AZURE_STORAGE_SAS_TTL,
        ip_filter=settings.sas_ip_filter,
    )

    logger.info("Writing SAS to file: %s", settings.CSM_OUT_SAS_FILE)
    await asyncio.to_thread(write_url_file, settings.CSM_OUT_SAS_FILE, sas_url)
    return sas_url


def main(**overrides) -> int:
    configure_logging()
    try:
        settings = load_settings(**overrides)
        configure_logging(settings.CSM_LOG_LEVEL, settings.CSM_LOG_FORMAT, settings.AZURE_SDK_LOG_LEVEL)
        asyncio.run(publish(settings))
    except Exception as e:
        logger.error("Error: %s", e)
        logger.debug("publish_failed", exc_info=True)
        return 1
    logger.info("Done")
    return 0


def run() -> None:
    raise SystemExit(main())
