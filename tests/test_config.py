"""Tests for maulog/config.py"""

import pytest
import yaml

from maulog.config import Config, load_config, load_yaml_config


class TestLoadYamlConfig:
    def test_no_path(self):
        assert load_yaml_config(None) == {}

    def test_missing_file(self, tmp_path):
        assert load_yaml_config(str(tmp_path / "missing.yml")) == {}

    def test_reads_mapping(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(yaml.dump({"log_dir": "/tmp/mau", "stop_timeout": 1.5}))
        assert load_yaml_config(str(path)) == {"log_dir": "/tmp/mau", "stop_timeout": 1.5}

    def test_non_mapping_ignored(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n")
        assert load_yaml_config(str(path)) == {}


class TestLoadConfig:
    def test_defaults(self, monkeypatch):
        for key in ("MAU_LOG_DIR", "MAU_LOG_SUFFIX", "MAU_LOG_LEVEL", "MAU_STOP_TIMEOUT"):
            monkeypatch.delenv(key, raising=False)
        cfg = load_config()
        assert cfg == Config()
        assert cfg.log_dir == "/Library/Logs/Microsoft"
        assert cfg.log_suffix == ".log"

    def test_yaml_overrides_defaults(self, monkeypatch):
        monkeypatch.delenv("MAU_LOG_DIR", raising=False)
        monkeypatch.delenv("MAU_LOG_LEVEL", raising=False)
        cfg = load_config({"log_dir": "/var/log/mau", "log_level": "debug"})
        assert cfg.log_dir == "/var/log/mau"
        assert cfg.log_level == "DEBUG"

    def test_env_overrides_yaml(self, monkeypatch):
        monkeypatch.setenv("MAU_LOG_DIR", "/env/dir")
        monkeypatch.setenv("MAU_STOP_TIMEOUT", "0.5")
        cfg = load_config({"log_dir": "/yaml/dir", "stop_timeout": 9})
        assert cfg.log_dir == "/env/dir"
        assert cfg.stop_timeout == 0.5

    def test_frozen(self):
        cfg = Config()
        with pytest.raises(AttributeError):
            cfg.log_dir = "x"
