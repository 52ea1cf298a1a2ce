from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional

from azure.storage.blob import BlobSasPermissions, generate_blob_sas

from csm_publish.domain.models import IpRange, StorageClients
from csm_publish.services.connection_string import require_account_credentials

logger = logging.getLogger("sas_service")

DEFAULT_TTL_MINUTES = 15
DEFAULT_PERMISSIONS = "r"


def sas_ip_range(ip_filter: Optional[str]) -> IpRange:
    if ip_filter:
        logger.info("SAS IP filter detected: %s", ip_filter)
        return IpRange.single(ip_filter)
    return IpRange.unrestricted()


def issue_sas_url(
    clients: StorageClients,
    credentials: Mapping[str, str],
    ttl_minutes: int = DEFAULT_TTL_MINUTES,
    ip_filter: Optional[str] = None,
    permissions: str = DEFAULT_PERMISSIONS,
    *,
    now: Optional[datetime] = None,
) -> str:
    """
    Mint a read SAS URL for clients.blob_path, signed with the account key.

    Valid from now until now + ttl_minutes. With ip_filter the token is bound
    to that single address, otherwise to the whole IPv4 range.
    Nothing is cached: every call signs a fresh token.
    """
    ttl_minutes = int(ttl_minutes)
    if ttl_minutes <= 0:
        raise ValueError(f"ttl_minutes must be positive, got {ttl_minutes}")

    account_name, account_key = require_account_credentials(credentials)

    logger.info("Generating SAS URL for %d minutes", ttl_minutes)
    logger.debug("Permissions: %s", permissions)

    start = now or datetime.now(timezone.utc)
    expiry = start + timedelta(minutes=ttl_minutes)
    ip_range = sas_ip_range(ip_filter)

    sas = generate_blob_sas(
        account_name=account_name,
        container_name=clients.container_name,
        blob_name=clients.blob_path,
        account_key=account_key,
        permission=BlobSasPermissions.from_string(permissions),
        start=start,
        expiry=expiry,
        ip=ip_range.to_sas_value(),
    )
    logger.debug("SAS: %s", sas)

    sas_url = f"{clients.blob_client.url}?{sas}"
    logger.info(
        "sas_url_issued",
        extra={
            "container": clients.container_name,
            "blob_path": clients.blob_path,
            "expires_on": expiry.isoformat(),
        },
    )
    return sas_url
