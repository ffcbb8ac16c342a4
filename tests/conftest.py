import pytest

from pto_balance.config import get_config


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Point the saved plan at a temp file and drop any PTO_* overrides."""
    for name in (
        "PTO_DEFAULT_WINDOW_MONTHS",
        "PTO_HOLIDAY_YEARS_BEFORE",
        "PTO_HOLIDAY_YEARS_AFTER",
        "PTO_LOG_LEVEL",
        "PTO_AZURE_BLOB_CONNECTION_STRING",
        "PTO_AZURE_BLOB_CONTAINER_NAME",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PTO_STATE_PATH", str(tmp_path / "pto_state.json"))
    yield get_config(force_reload=True)
