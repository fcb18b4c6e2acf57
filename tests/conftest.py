import pytest


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the real home directory and Vault settings."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    for var in ("VAULT_ADDR", "VAULT_CONFIG_PATH", "VAULT_TOKEN_HELPER_DB",
                "VAULT_TOKEN_HELPER_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return home
