from __future__ import annotations

import logging
from pathlib import Path

import pytest

from quiz_master.config import DEFAULT_MODEL, AppConfig, configure_logging, load_api_key


@pytest.fixture(autouse=True)
def _no_env_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


def test_defaults_without_config_file(tmp_path: Path):
    cfg = AppConfig.load(config_path=tmp_path / "missing.toml", env_path=tmp_path / ".env")
    assert cfg.gemini_model == DEFAULT_MODEL == "gemini-2.5-flash"
    assert cfg.gemini_api_key == ""
    assert cfg.theme == "light"
    assert cfg.log_level == "INFO"
    assert cfg.log_file is None


def test_reads_config_toml(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text(
        "\n".join(
            [
                "[app]",
                'name = "Trivia Night"',
                'theme = "dark"',
                "[gemini]",
                'model = "gemini-2.5-pro"',
                "[logging]",
                'level = "debug"',
                'file = "logs/app.log"',
            ]
        ),
        encoding="utf-8",
    )

    cfg = AppConfig.load(config_path=path, env_path=tmp_path / ".env")

    assert cfg.app_name == "Trivia Night"
    assert cfg.theme == "dark"
    assert cfg.gemini_model == "gemini-2.5-pro"
    assert cfg.log_level == "DEBUG"
    assert cfg.log_file == tmp_path / "logs" / "app.log"


def test_invalid_values_fall_back_to_defaults(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text(
        '[app]\ntheme = "neon"\n[logging]\nlevel = "LOUD"\n[gemini]\nmodel = 3\n',
        encoding="utf-8",
    )
    cfg = AppConfig.load(config_path=path, env_path=tmp_path / ".env")
    assert cfg.theme == "light"
    assert cfg.log_level == "INFO"
    assert cfg.gemini_model == DEFAULT_MODEL


def test_broken_toml_is_ignored(tmp_path: Path, caplog):
    path = tmp_path / "config.toml"
    path.write_text("[app]\nname\n", encoding="utf-8")
    with caplog.at_level("WARNING", logger="quiz_master.config"):
        cfg = AppConfig.load(config_path=path, env_path=tmp_path / ".env")
    assert cfg.app_name == "Quiz Master"
    assert "Ignoring unreadable config file" in caplog.text


def test_api_key_from_environment(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    env = tmp_path / ".env"
    env.write_text("GEMINI_API_KEY=from-file\n", encoding="utf-8")
    assert load_api_key(env) == "from-env"


def test_api_key_from_dotenv(tmp_path: Path):
    env = tmp_path / ".env"
    env.write_text("OTHER=1\nGEMINI_API_KEY= from-file \n", encoding="utf-8")
    assert load_api_key(env) == "from-file"


def test_configure_logging_adds_file_handler(monkeypatch, tmp_path: Path):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

    log_file = tmp_path / "logs" / "quiz.log"
    configure_logging(AppConfig(log_level="DEBUG", log_file=log_file))

    handlers = calls["handlers"]
    try:
        assert calls["level"] == logging.DEBUG
        assert calls["force"] is True
        assert "%(levelname)s" in calls["format"]
        assert log_file.parent.is_dir()
        file_handlers = [h for h in handlers if isinstance(h, logging.FileHandler)]
        assert [h.baseFilename for h in file_handlers] == [str(log_file)]
    finally:
        for handler in handlers:
            handler.close()


def test_configure_logging_without_file(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

    configure_logging(AppConfig())

    assert calls["level"] == logging.INFO
    assert len(calls["handlers"]) == 1
    assert not isinstance(calls["handlers"][0], logging.FileHandler)
