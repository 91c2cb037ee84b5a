from schoolwatch import config as config_module
from schoolwatch.config import SchoolWatchConfig, get_config, reset_config


def test_defaults(monkeypatch):
    monkeypatch.delenv("SCHOOLWATCH_API_BASE_URL", raising=False)
    monkeypatch.delenv("SCHOOLWATCH_STATE_DIR", raising=False)

    config = SchoolWatchConfig(_env_file=None)

    assert config.api_base_url == "https://school-api-1i8w.onrender.com"
    assert config.request_timeout is None
    assert config.cache_key == "cachedTimetable"
    assert (config.default_grade, config.default_classno) == (2, 6)
    assert config.meal_lookahead_days == 15


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SCHOOLWATCH_API_BASE_URL", "https://school.example")
    monkeypatch.setenv("SCHOOLWATCH_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("schoolwatch_log_json", "true")

    config = SchoolWatchConfig(_env_file=None)

    assert config.api_base_url == "https://school.example"
    assert config.request_timeout == 2.5
    assert config.log_json is True


def test_get_config_is_cached(monkeypatch):
    monkeypatch.setattr(config_module, "_config", None)

    first = get_config()
    assert get_config() is first

    reset_config()
    assert get_config() is not first
