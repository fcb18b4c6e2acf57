"""
Unit tests for vault_token_helper.config
"""

from __future__ import annotations

import os

from vault_token_helper.config import Config, default_db_path


class TestConfig:
    def test_defaults(self):
        cfg = Config.load()
        assert cfg.VAULT_ADDR == "https://127.0.0.1:8200"
        assert cfg.LOG_LEVEL == "info"
        assert cfg.DB_PATH is None

    def test_default_db_path_uses_xdg_data_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        assert default_db_path() == os.path.join(
            str(tmp_path / "data"), "vault-token-helper.db")
        assert Config.load().resolve_db_path() == default_db_path()

    def test_default_db_path_falls_back_to_local_share(self, _isolated_env,
                                                       monkeypatch):
        monkeypatch.delenv("XDG_DATA_HOME")
        assert default_db_path() == os.path.join(
            str(_isolated_env), ".local", "share", "vault-token-helper.db")

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        cfg_file = tmp_path / "cfg.yaml"
        cfg_file.write_text(
            "vault_addr: https://yaml.example.com\n"
            "db_path: /yaml/tokens.db\n"
            "log_level: debug\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("VAULT_ADDR", "https://env.example.com")
        cfg = Config.load(str(cfg_file))
        assert cfg.VAULT_ADDR == "https://env.example.com"
        assert cfg.DB_PATH == "/yaml/tokens.db"
        assert cfg.LOG_LEVEL == "debug"

    def test_yaml_in_xdg_config_home(self, _isolated_env):
        cfg_dir = _isolated_env / ".config" / "vault-token-helper"
        cfg_dir.mkdir(parents=True)
        (cfg_dir / "config.yaml").write_text(
            "vault_addr: https://xdg.example.com\n", encoding="utf-8")
        assert Config.load().VAULT_ADDR == "https://xdg.example.com"

    def test_yaml_in_home(self, _isolated_env):
        (_isolated_env / ".vault-token-helper.yaml").write_text(
            "log_level: warn\n", encoding="utf-8")
        assert Config.load().LOG_LEVEL == "warn"

    def test_invalid_yaml_is_ignored(self, tmp_path):
        cfg_file = tmp_path / "bad.yaml"
        cfg_file.write_text("vault_addr: [unclosed\n", encoding="utf-8")
        assert Config.load(str(cfg_file)).VAULT_ADDR == "https://127.0.0.1:8200"

    def test_non_mapping_yaml_is_ignored(self, tmp_path):
        cfg_file = tmp_path / "list.yaml"
        cfg_file.write_text("- a\n- b\n", encoding="utf-8")
        assert Config.load(str(cfg_file)).LOG_LEVEL == "info"

    def test_missing_explicit_file_uses_defaults(self, tmp_path):
        assert Config.load(str(tmp_path / "nope.yaml")).LOG_LEVEL == "info"

    def test_db_path_from_env_expands_user(self, _isolated_env, monkeypatch):
        monkeypatch.setenv("VAULT_TOKEN_HELPER_DB", "~/tokens.db")
        assert Config.load().resolve_db_path() == os.path.join(
            str(_isolated_env), "tokens.db")
