from __future__ import annotations

from ipaddress import IPv4Address
from pathlib import Path
from typing import Literal, Optional

from pydantic import DirectoryPath, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from csm_publish.errors import ConfigurationError


DEFAULT_ZIP_FILE = "csm-download-data.zip"
DEFAULT_SAS_FILE = "/var/download_url"
DEFAULT_SAS_TTL_MINUTES = 15


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    # Input data
    CSM_DATA_ABSOLUTE_PATH: DirectoryPath = Field(..., description="Directory to publish")
    CSM_OUTPUT_ZIP_FILE: str = Field(default=DEFAULT_ZIP_FILE, min_length=1)

    # Azure Blob
    AZURE_STORAGE_CONNECTION_STRING: str = Field(
        ..., description="Azure Storage connection string (must include AccountName and AccountKey)"
    )
    AZURE_STORAGE_CONTAINER_BLOB_PREFIX: str = Field(..., description="container/optional/blob/prefix")

    # SAS policy
    AZURE_STORAGE_SAS_TTL: int = Field(default=DEFAULT_SAS_TTL_MINUTES, gt=0, description="minutes")
    # sip only takes IPv4
    AZURE_STORAGE_SAS_IP_FILTER: Optional[IPv4Address] = None

    # Output
    CSM_OUT_SAS_FILE: Path = Field(default=Path(DEFAULT_SAS_FILE))

    # Logging
    CSM_LOG_LEVEL: str = Field(default="INFO")
    CSM_LOG_FORMAT: Literal["text", "json"] = "text"
    AZURE_SDK_LOG_LEVEL: str = Field(default="WARNING")

    @field_validator("AZURE_STORAGE_SAS_IP_FILTER", mode="before")
    @classmethod
    def _blank_ip_is_unset(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("CSM_LOG_FORMAT", mode="before")
    @classmethod
    def _lower_log_format(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("CSM_DATA_ABSOLUTE_PATH")
    @classmethod
    def _absolute_data_path(cls, v: Path) -> Path:
        return v.resolve()

    @field_validator("AZURE_STORAGE_CONNECTION_STRING", "AZURE_STORAGE_CONTAINER_BLOB_PREFIX")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @property
    def sas_ip_filter(self) -> Optional[str]:
        ip = self.AZURE_STORAGE_SAS_IP_FILTER
        return str(ip) if ip is not None else None


def _describe(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        name = ".".join(str(p) for p in err.get("loc", ())) or "settings"
        if err.get("type") == "missing":
            problems.append(f"{name} is mandatory")
        else:
            problems.append(f"{name}: {err.get('msg')}")
    return "; ".join(problems)


def load_settings(**overrides) -> Settings:
    """
    Build the run configuration once, from the environment (and .env).

    Keyword overrides take precedence over the environment.
    Raises ConfigurationError naming every invalid or missing variable.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(_describe(e)) from e
