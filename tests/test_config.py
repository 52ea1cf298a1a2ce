"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from csm_publish.config import DEFAULT_SAS_FILE, DEFAULT_ZIP_FILE, load_settings
from csm_publish.errors import ConfigurationError


@pytest.fixture
def required_env(monkeypatch, data_dir, connection_string):
    monkeypatch.setenv("CSM_DATA_ABSOLUTE_PATH", str(data_dir))
    monkeypatch.setenv("AZURE_STORAGE_CONNECTION_STRING", connection_string)
    monkeypatch.setenv("AZURE_STORAGE_CONTAINER_BLOB_PREFIX", "mycontainer/exports")


class TestLoadSettings:
    def test_defaults(self, required_env, data_dir):
        s = load_settings()

        assert s.CSM_DATA_ABSOLUTE_PATH == data_dir.resolve()
        assert s.AZURE_STORAGE_CONTAINER_BLOB_PREFIX == "mycontainer/exports"
        assert s.AZURE_STORAGE_SAS_TTL == 15
        assert s.CSM_OUTPUT_ZIP_FILE == DEFAULT_ZIP_FILE == "csm-download-data.zip"
        assert s.CSM_OUT_SAS_FILE == Path(DEFAULT_SAS_FILE) == Path("/var/download_url")
        assert s.sas_ip_filter is None
        assert s.CSM_LOG_LEVEL == "INFO"
        assert s.CSM_LOG_FORMAT == "text"

    def test_optional_values_from_env(self, required_env, monkeypatch, tmp_path):
        monkeypatch.setenv("AZURE_STORAGE_SAS_TTL", "60")
        monkeypatch.setenv("AZURE_STORAGE_SAS_IP_FILTER", "203.0.113.5")
        monkeypatch.setenv("CSM_OUTPUT_ZIP_FILE", "bundle.zip")
        monkeypatch.setenv("CSM_OUT_SAS_FILE", str(tmp_path / "url.txt"))
        monkeypatch.setenv("CSM_LOG_FORMAT", "JSON")

        s = load_settings()

        assert s.AZURE_STORAGE_SAS_TTL == 60
        assert s.sas_ip_filter == "203.0.113.5"
        assert s.CSM_OUTPUT_ZIP_FILE == "bundle.zip"
        assert s.CSM_OUT_SAS_FILE == tmp_path / "url.txt"
        assert s.CSM_LOG_FORMAT == "json"

    def test_blank_ip_filter_means_unrestricted(self, required_env, monkeypatch):
        monkeypatch.setenv("AZURE_STORAGE_SAS_IP_FILTER", "  ")
        assert load_settings().sas_ip_filter is None

    def test_invalid_ip_filter(self, required_env, monkeypatch):
        monkeypatch.setenv("AZURE_STORAGE_SAS_IP_FILTER", "not-an-ip")
        with pytest.raises(ConfigurationError, match="AZURE_STORAGE_SAS_IP_FILTER"):
            load_settings()

    @pytest.mark.parametrize("ip", ["2001:db8::1", "::1"])
    def test_ipv6_filter_rejected(self, required_env, monkeypatch, ip):
        monkeypatch.setenv("AZURE_STORAGE_SAS_IP_FILTER", ip)
        with pytest.raises(ConfigurationError, match="AZURE_STORAGE_SAS_IP_FILTER"):
            load_settings()

    def test_ipv6_filter_rejected_as_override(self, required_env):
        with pytest.raises(ConfigurationError, match="AZURE_STORAGE_SAS_IP_FILTER"):
            load_settings(AZURE_STORAGE_SAS_IP_FILTER="2001:db8::1")

    @pytest.mark.parametrize("ttl", ["0", "-1", "abc"])
    def test_invalid_ttl(self, required_env, monkeypatch, ttl):
        monkeypatch.setenv("AZURE_STORAGE_SAS_TTL", ttl)
        with pytest.raises(ConfigurationError, match="AZURE_STORAGE_SAS_TTL"):
            load_settings()

    def test_missing_required_values_are_named(self):
        with pytest.raises(ConfigurationError) as exc:
            load_settings()
        msg = str(exc.value)
        assert "CSM_DATA_ABSOLUTE_PATH is mandatory" in msg
        assert "AZURE_STORAGE_CONNECTION_STRING is mandatory" in msg
        assert "AZURE_STORAGE_CONTAINER_BLOB_PREFIX is mandatory" in msg

    def test_data_path_must_be_a_directory(self, required_env, monkeypatch, tmp_path):
        monkeypatch.setenv("CSM_DATA_ABSOLUTE_PATH", str(tmp_path / "nope"))
        with pytest.raises(ConfigurationError, match="CSM_DATA_ABSOLUTE_PATH"):
            load_settings()

    def test_blank_connection_string_rejected(self, required_env, monkeypatch):
        monkeypatch.setenv("AZURE_STORAGE_CONNECTION_STRING", "   ")
        with pytest.raises(ConfigurationError, match="AZURE_STORAGE_CONNECTION_STRING"):
            load_settings()

    def test_overrides_win_over_env(self, required_env):
        s = load_settings(AZURE_STORAGE_SAS_TTL=5)
        assert s.AZURE_STORAGE_SAS_TTL == 5

    def test_settings_are_frozen(self, required_env):
        s = load_settings()
        with pytest.raises(ValidationError):
            s.AZURE_STORAGE_SAS_TTL = 30
