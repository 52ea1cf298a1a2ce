import pytest

# base64, with '=' padding on purpose
ACCOUNT_KEY = "Y3NtLXB1Ymxpc2gtdGVzdC1rZXktMDEyMzQ1Njc4OWFiY2RlZjAxMjM0NTY3ODlhYmNkZWYwMTIzNDU2Nzg5WA=="
ACCOUNT_NAME = "testacct"
CONNECTION_STRING = (
    "DefaultEndpointsProtocol=https;"
    f"AccountName={ACCOUNT_NAME};"
    f"AccountKey={ACCOUNT_KEY};"
    "EndpointSuffix=core.windows.net"
)

ENV_VARS = (
    "CSM_DATA_ABSOLUTE_PATH",
    "AZURE_STORAGE_CONNECTION_STRING",
    "AZURE_STORAGE_CONTAINER_BLOB_PREFIX",
    "AZURE_STORAGE_SAS_TTL",
    "CSM_OUTPUT_ZIP_FILE",
    "AZURE_STORAGE_SAS_IP_FILTER",
    "CSM_OUT_SAS_FILE",
    "CSM_LOG_LEVEL",
    "CSM_LOG_FORMAT",
    "AZURE_SDK_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep the host environment and any local .env out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def connection_string():
    return CONNECTION_STRING


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture
def multi_file_dir(data_dir):
    (data_dir / "a.csv").write_text("id,value\n1,10\n2,20\n")
    (data_dir / "b.json").write_text('{"ok": true}')
    sub = data_dir / "nested"
    sub.mkdir()
    (sub / "c.bin").write_bytes(bytes(range(256)) * 16)
    return data_dir
