"""Tests for environment configuration loading."""

from grocery_shopper.config import Config, load_config

SETTINGS = ["DATABASE_URL", "HOST", "PORT", "CORS_ORIGINS", "LOG_LEVEL"]


def clear_env(monkeypatch):
    # setenv first so teardown restores whatever was there before
    for name in SETTINGS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults(monkeypatch):
    clear_env(monkeypatch)
    config = Config()
    assert config.DATABASE_URL == "sqlite:///./grocery.db"
    assert config.HOST == "127.0.0.1"
    assert config.PORT == 3001
    assert config.CORS_ORIGINS == ["*"]
    assert config.LOG_LEVEL == "INFO"


def test_environment_overrides(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    config = Config()
    assert config.PORT == 8080
    assert config.CORS_ORIGINS == ["http://a.test", "http://b.test"]
    assert config.LOG_LEVEL == "DEBUG"


def test_load_config_reads_env_file(monkeypatch, tmp_path):
    clear_env(monkeypatch)
    env_file = tmp_path / ".env"
    env_file.write_text(
        "DATABASE_URL=sqlite:///./from-env-file.db\nPORT=4100\n", encoding="utf-8"
    )
    config = load_config(env_file)
    assert config.DATABASE_URL == "sqlite:///./from-env-file.db"
    assert config.PORT == 4100


def test_environment_wins_over_env_file(monkeypatch, tmp_path):
    clear_env(monkeypatch)
    monkeypatch.setenv("PORT", "5000")
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=4100\n", encoding="utf-8")
    assert load_config(env_file).PORT == 5000
