from __future__ import annotations

import logging
from typing import Dict, Mapping, Tuple

from csm_publish.errors import ConfigurationError

logger = logging.getLogger("connection_string")

SECRET_FIELDS = ("AccountKey", "SharedAccessSignature")
MASK = "**********"


def parse_connection_string(cs: str) -> Dict[str, str]:
    """
    Split an Azure Storage connection string into its fields.

      "DefaultEndpointsProtocol=https;AccountName=acct;AccountKey=abc==;EndpointSuffix=core.windows.net"

    Each field is split on its FIRST '=' only; base64 keys keep their '=' padding.
    Empty fields and fields without '=' are skipped. No schema is enforced here.
    """
    out: Dict[str, str] = {}
    logger.debug("--- Connection String infos")
    for item in (cs or "").split(";"):
        if "=" not in item:
            continue
        k, v = item.split("=", 1)
        k = k.strip()
        if not k:
            continue
        out[k] = v.strip()
        logger.debug("%s: %s", k, MASK if k in SECRET_FIELDS else out[k])
    logger.debug("---")
    return out


def masked(infos: Mapping[str, str]) -> Dict[str, str]:
    return {k: (MASK if k in SECRET_FIELDS else v) for k, v in infos.items()}


def require_account_credentials(infos: Mapping[str, str]) -> Tuple[str, str]:
    """Return (AccountName, AccountKey); both are required to mint a SAS."""
    name = (infos.get("AccountName") or "").strip()
    key = (infos.get("AccountKey") or "").strip()
    missing = [f for f, v in (("AccountName", name), ("AccountKey", key)) if not v]
    if missing:
        raise ConfigurationError(
            f"AZURE_STORAGE_CONNECTION_STRING must include {' and '.join(missing)}"
        )
    return name, key
