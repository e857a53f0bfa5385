import pytest

from klb_describe.config import (
    CONFIG_ENV,
    DEFAULT_API_HOST,
    DEFAULT_API_PREFIX,
    ENV_VARS,
    ConfigError,
    Settings,
    load_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV, raising=False)
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings.api_host == DEFAULT_API_HOST
        assert settings.api_prefix == DEFAULT_API_PREFIX
        assert settings.api_base_url == "https://ws.atonline.com/_rest/"
        assert settings.max_depth == 4

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "klb.yaml"
        path.write_text("api_host: api.example.com\ntimeout: 10\n", encoding="utf-8")
        settings = load_settings(path)
        assert settings.api_host == "api.example.com"
        assert settings.timeout == 10.0

    def test_config_env(self, tmp_path, monkeypatch):
        path = tmp_path / "klb.yaml"
        path.write_text("max_depth: 2\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV, str(path))
        assert load_settings().max_depth == 2

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "klb.yaml"
        path.write_text("api_host: file.example.com\n", encoding="utf-8")
        monkeypatch.setenv("KLB_API_HOST", "env.example.com")
        monkeypatch.setenv("KLB_TIMEOUT", "2.5")
        settings = load_settings(path)
        assert settings.api_host == "env.example.com"
        assert settings.timeout == 2.5

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("KLB_API_HOST", "env.example.com")
        assert load_settings(api_host="flag.example.com").api_host == "flag.example.com"
        assert load_settings(api_host=None).api_host == "env.example.com"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "klb.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(path) == Settings()


class TestConfigErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_settings(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "klb.yaml"
        path.write_text("api_host: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "klb.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_settings(path)

    def test_invalid_value(self, monkeypatch):
        monkeypatch.setenv("KLB_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings()
