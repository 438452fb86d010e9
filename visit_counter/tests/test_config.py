import json

import pytest

from visit_counter.config import Settings, load_settings, require_valid
from visit_counter.exceptions import ConfigError


def test_defaults():
    settings = load_settings(environ={})
    assert settings.counters_path.endswith("counters.json")
    assert settings.api_key is None
    assert settings.log_level == "INFO"
    assert settings.cors_origins == ["*"]
    assert settings.validate() == []


def test_environment_overrides():
    settings = load_settings(environ={
        "COUNTERS_PATH": "/tmp/c.json",
        "API_KEY": "k",
        "LOG_LEVEL": "debug",
        "CORS_ORIGINS": "http://a.test, http://b.test",
        "PORT": "9000",
    })
    assert settings.counters_path == "/tmp/c.json"
    assert settings.api_key == "k"
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.port == 9000


def test_file_beats_environment(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"counters_path": "/srv/counters.json", "port": 8081}))
    settings = load_settings(environ={"COUNTERS_PATH": "/tmp/c.json", "VISIT_COUNTER_CONFIG": str(cfg)})
    assert settings.counters_path == "/srv/counters.json"
    assert settings.port == 8081


def test_invalid_values_fall_back_to_defaults(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"log_level": "LOUD", "port": 70000}))
    settings = load_settings(str(cfg), environ={"API_KEY": "k"})
    assert settings.log_level == "INFO"
    assert settings.port == 8000
    assert settings.api_key == "k"


def test_broken_config_file_is_ignored(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text("{oops")
    settings = load_settings(str(cfg), environ={})
    assert settings == Settings()


def test_require_valid():
    with pytest.raises(ConfigError) as exc:
        require_valid(Settings(port=0))
    assert exc.value.errors


def test_api_key_is_masked():
    assert Settings(api_key="secret").to_dict()["api_key"] == "***"
