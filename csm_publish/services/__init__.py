"""
Pipeline stages, leaf first:
    package_directory(dir_path, zip_file_name) -> PackagedFile | None
    parse_connection_string(cs) -> dict
    create_storage_clients(cs, container_blob_prefix, blob_name) -> StorageClients
    upload_file(clients, packaged) -> None
    issue_sas_url(clients, credentials, ttl_minutes, ip_filter, permissions) -> str
"""

from csm_publish.services.connection_string import parse_connection_string
from csm_publish.services.packager import package_directory
from csm_publish.services.sas_service import issue_sas_url
from csm_publish.services.storage_clients import create_storage_clients
from csm_publish.services.uploader import upload_file

__all__ = [
    "create_storage_clients",
    "issue_sas_url",
    "package_directory",
    "parse_connection_string",
    "upload_file",
]
