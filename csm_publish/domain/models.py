from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


FULL_IP_RANGE_START = "0.0.0.0"
FULL_IP_RANGE_END = "255.255.255.255"


@dataclass(frozen=True)
class PackagedFile:
    """The single file handed to the uploader: a source file or a fresh archive."""
    file_name: str
    file_path: Path


@dataclass(frozen=True)
class StorageClients:
    """
    Handles resolved for one run.

    blob_path is the full blob name inside the container:
      {blob_prefix}/{file_name}  or  {file_name} when there is no prefix
    """
    blob_service_client: Any
    container_client: Any
    blob_client: Any
    container_name: str
    blob_path: str


@dataclass(frozen=True)
class IpRange:
    start: str
    end: str

    @classmethod
    def unrestricted(cls) -> "IpRange":
        return cls(start=FULL_IP_RANGE_START, end=FULL_IP_RANGE_END)

    @classmethod
    def single(cls, ip: str) -> "IpRange":
        return cls(start=ip, end=ip)

    def to_sas_value(self) -> str:
        # sip accepts "a.b.c.d" or "a.b.c.d-e.f.g.h"
        if self.start == self.end:
            return self.start
        return f"{self.start}-{self.end}"
