"""Config reload must be atomic; keep old config on failure."""
import pytest

from edupass.utils.config_loader import ConfigLoader, EduPassConfig


def _loader(tmp_path) -> ConfigLoader:
    loader = ConfigLoader()
    loader.config_dir = tmp_path
    loader.config_file = tmp_path / "ledger.yaml"
    return loader


class TestConfigReloadSafety:
    def test_valid_config_loads(self, tmp_path):
        loader = _loader(tmp_path)
        loader.config_file.write_text("""
version: 1
database:
  path: /var/lib/edupass/ledger.db
ledger:
  require_initialized: true
server:
  host: 0.0.0.0
  port: 9200
logging:
  level: DEBUG
""")
        config = loader.load_config()
        assert config.database.path == "/var/lib/edupass/ledger.db"
        assert config.ledger.require_initialized is True
        assert config.server.port == 9200
        assert config.logging.level == "DEBUG"

    def test_missing_file_uses_defaults(self, tmp_path):
        config = _loader(tmp_path).load_config()
        assert config == EduPassConfig()
        assert config.ledger.require_initialized is False
        assert config.server.port == 9100

    def test_partial_file_fills_defaults(self, tmp_path):
        loader = _loader(tmp_path)
        loader.config_file.write_text("ledger:\n  require_initialized: true\n")
        config = loader.load_config()
        assert config.ledger.require_initialized is True
        assert config.server.host == "127.0.0.1"

    def test_invalid_config_preserves_old(self, tmp_path):
        loader = _loader(tmp_path)
        loader.config_file.write_text("server:\n  port: 9300\n")
        loader.load_config()

        loader.config_file.write_text("server:\n  port: 70000\n")
        with pytest.raises(ValueError, match="previous config retained"):
            loader.load_config()
        assert loader.config.server.port == 9300

    def test_invalid_config_without_fallback(self, tmp_path):
        loader = _loader(tmp_path)
        loader.config_file.write_text("version: 2\n")
        with pytest.raises(ValueError, match="no fallback"):
            loader.load_config()
        assert loader.config is None

    def test_non_mapping_yaml_rejected(self, tmp_path):
        loader = _loader(tmp_path)
        loader.config_file.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            loader.load_config()

    def test_write_default_once(self, tmp_path):
        loader = _loader(tmp_path / "nested")
        assert loader.write_default() is True
        assert loader.write_default() is False
        assert loader.load_config() == EduPassConfig()


class TestEnvironmentOverrides:
    def test_db_path_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("EDUPASS_DB_PATH", str(tmp_path / "other.db"))
        assert EduPassConfig().db_path() == str(tmp_path / "other.db")

    def test_db_path_expands_home(self, monkeypatch):
        monkeypatch.delenv("EDUPASS_DB_PATH", raising=False)
        config = EduPassConfig(database={"path": "~/ledger.db"})
        assert not config.db_path().startswith("~")

    def test_log_level_override(self, monkeypatch):
        monkeypatch.setenv("EDUPASS_LOG_LEVEL", "warning")
        assert EduPassConfig().log_level() == "WARNING"
