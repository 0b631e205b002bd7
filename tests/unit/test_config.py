from nbsnapshot.core.config import Settings, get_settings


def test_settings_defaults():
    settings = Settings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.log_format == "text"
    assert settings.browser_headless is True
    assert settings.download_timeout_ms == 600000


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("BROWSER_HEADLESS", "false")
    monkeypatch.setenv("LOGIN_CHECK_TIMEOUT_MS", "2500")
    monkeypatch.setenv("LOG_FORMAT", "json")

    settings = Settings(_env_file=None)

    assert settings.browser_headless is False
    assert settings.login_check_timeout_ms == 2500
    assert settings.log_format == "json"


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()
