from pathlib import Path

from affiliate_resolver.config import MAX_HOPS, load_config


def test_load_config_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("AFR_TIMEOUT", "3")
    monkeypatch.setenv("AFR_CONCURRENCY", "12")
    monkeypatch.setenv("AFR_SUMMARY_JSON", str(tmp_path / "s.json"))
    config = load_config(env_file=None)
    assert config.timeout == 3.0
    assert config.concurrency == 12
    assert config.summary_json == tmp_path / "s.json"
    assert config.max_hops == MAX_HOPS


def test_load_config_reads_env_file(monkeypatch, tmp_path):
    # registered first so teardown removes what load_dotenv sets
    monkeypatch.setenv("AFR_MAX_HOPS", "0")
    monkeypatch.delenv("AFR_MAX_HOPS")
    env_file = tmp_path / ".env"
    env_file.write_text("AFR_MAX_HOPS=4\n")
    config = load_config(env_file=str(env_file))
    assert config.max_hops == 4
    assert isinstance(config.summary_json, Path)
