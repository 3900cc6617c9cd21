import pytest

from chessboard.config import Settings


def test_defaults_without_environment():
    settings = Settings.from_env({})
    assert settings == Settings()
    assert settings.rules == "standard"
    assert settings.cors_origins == ("*",)
    assert settings.port == 8000


def test_values_from_environment():
    settings = Settings.from_env({
        "CHESSBOARD_RULES": "Sandbox",
        "CHESSBOARD_LOG_LEVEL": "debug",
        "CHESSBOARD_CORS_ORIGINS": "http://localhost:5173, http://127.0.0.1:5173,",
        "CHESSBOARD_HOST": "0.0.0.0",
        "CHESSBOARD_PORT": "9000",
    })
    assert settings.rules == "sandbox"
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ("http://localhost:5173", "http://127.0.0.1:5173")
    assert settings.host == "0.0.0.0"
    assert settings.port == 9000


def test_unknown_rules_are_rejected():
    with pytest.raises(ValueError):
        Settings.from_env({"CHESSBOARD_RULES": "atomic"})


def test_bad_port_is_rejected():
    with pytest.raises(ValueError):
        Settings.from_env({"CHESSBOARD_PORT": "eighty"})


def test_reads_os_environ(monkeypatch):
    monkeypatch.setenv("CHESSBOARD_PORT", "8123")
    assert Settings.from_env().port == 8123
