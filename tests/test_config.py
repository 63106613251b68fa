from favicon_fetch.config import DEFAULT_MAX_CONCURRENCY, DEFAULT_TIMEOUT, FetchConfig


def test_defaults(monkeypatch):
    for name in ("FAVICON_FETCH_TIMEOUT", "FAVICON_FETCH_MAX_CONCURRENCY", "FAVICON_FETCH_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)
    config = FetchConfig.from_env()
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.max_concurrency == DEFAULT_MAX_CONCURRENCY == 10
    assert "Mozilla" in config.headers()["User-Agent"]


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("FAVICON_FETCH_TIMEOUT", "3.5")
    monkeypatch.setenv("FAVICON_FETCH_MAX_CONCURRENCY", "4")
    monkeypatch.setenv("FAVICON_FETCH_USER_AGENT", "favicon-bot/1.0")
    config = FetchConfig.from_env()
    assert config.timeout == 3.5
    assert config.max_concurrency == 4
    assert config.headers()["User-Agent"] == "favicon-bot/1.0"


def test_bad_env_values_keep_defaults(monkeypatch, caplog):
    monkeypatch.setenv("FAVICON_FETCH_TIMEOUT", "soon")
    monkeypatch.setenv("FAVICON_FETCH_MAX_CONCURRENCY", "0")
    with caplog.at_level("WARNING", logger="favicon_fetch"):
        config = FetchConfig.from_env()
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.max_concurrency == DEFAULT_MAX_CONCURRENCY
    assert "FAVICON_FETCH_TIMEOUT" in caplog.text
    assert "FAVICON_FETCH_MAX_CONCURRENCY" in caplog.text
