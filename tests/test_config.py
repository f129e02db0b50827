import pytest

from shared.config import AppConfig, ReflectorConfig, get_config


def test_defaults():
    config = AppConfig()
    assert config.reflector.zero_as_null is True
    assert config.reflector.log_traces is True
    assert config.reflector.import_roots == []
    assert config.global_settings.log_level == "WARNING"


def test_load_from_toml(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        """
[global]
log_level = "DEBUG"
log_json = true
unknown_key = 1

[reflector]
zero_as_null = false
denied_types = ["java.lang.Runtime"]
import_roots = ["myproject"]

[reflector.aliases]
"com.example.Crypto" = "myproject.crypto.Crypto"
""",
        encoding="utf-8",
    )
    config = AppConfig.load(path)
    assert config.global_settings.log_level == "DEBUG"
    assert config.global_settings.log_json is True
    assert config.reflector.zero_as_null is False
    assert config.reflector.denied_types == ["java.lang.Runtime"]
    assert config.reflector.aliases == {"com.example.Crypto": "myproject.crypto.Crypto"}
    assert config.to_dict()["reflector"]["import_roots"] == ["myproject"]


def test_explicit_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load(tmp_path / "absent.toml")


def test_get_config_reloads_for_explicit_path(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[reflector]\nlog_traces = false\n", encoding="utf-8")
    assert get_config(path).reflector.log_traces is False
    assert get_config() is get_config()


def test_reflector_config_lists_are_independent():
    a, b = ReflectorConfig(), ReflectorConfig()
    a.denied_types.append("x")
    assert b.denied_types == []
