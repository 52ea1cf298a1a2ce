"""Publish a data directory to Azure Blob Storage and write a time-limited SAS download URL."""

__version__ = "1.0.0"
