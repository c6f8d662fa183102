import json

from typer.testing import CliRunner

from resolver_service.cli import app
from resolver_service.config import Settings


def test_show_config_prints_settings():
    result = CliRunner().invoke(app, ["show-config"])
    assert result.exit_code == 0
    shown = json.loads(result.output)
    assert shown["max_body_bytes"] == 1_000_000
    assert "max_hops" in shown


def test_settings_build_resolver_config(monkeypatch):
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "4.5")
    monkeypatch.setenv("MAX_HOPS", "6")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = Settings(_env_file=None)
    config = settings.resolver_config()
    assert settings.log_level == "DEBUG"
    assert config.timeout == 4.5
    assert config.max_hops == 6
    assert config.max_html_bytes == 256 * 1024
