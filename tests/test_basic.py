"""Basic tests for Company Search."""

import pytest

from company_search.utils.config import Config, get_config, load_config


def test_version():
    """Test version is set."""
    from company_search import __version__

    assert __version__ == "0.1.0"


def test_default_config():
    """Defaults cover the corpus, search cap and daily limit."""
    config = Config()

    assert config.get("data.corpus_dir") == "./data"
    assert config.get("search.max_results") == 50
    assert config.get("search.min_query_length") == 2
    assert config.get("rate_limit.max_queries") == 10
    assert config.get("rate_limit.window_seconds") == 86400
    assert config.get("missing.key", "fallback") == "fallback"


def test_yaml_config_merges_with_defaults(tmp_path):
    """A partial YAML file overrides only the keys it names."""
    path = tmp_path / "config.yml"
    path.write_text("rate_limit:\n  max_queries: 3\n", encoding="utf-8")

    config = load_config(path)

    assert config.get("rate_limit.max_queries") == 3
    assert config.get("rate_limit.window_seconds") == 86400
    assert get_config() is config


def test_config_from_env(tmp_path, monkeypatch):
    path = tmp_path / "custom.yml"
    path.write_text("search:\n  max_results: 5\n", encoding="utf-8")
    monkeypatch.setenv("COMPANY_SEARCH_CONFIG", str(path))

    assert get_config().get("search.max_results") == 5


def test_yaml_must_be_mapping(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        Config.from_yaml(path)


def test_unreadable_env_config_falls_back_to_defaults(tmp_path, monkeypatch):
    path = tmp_path / "broken.yml"
    path.write_text("search: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("COMPANY_SEARCH_CONFIG", str(path))
    monkeypatch.chdir(tmp_path)

    assert get_config().get("search.max_results") == 50


def test_set_creates_sections():
    config = Config()

    config.set("fields.patterns.name", "Firm")
    config.set("extra.nested.flag", True)

    assert config.get("fields.patterns.name") == "Firm"
    assert config.get("fields.patterns.identifier") == "CIN"
    assert config.get("extra.nested.flag") is True


def test_timed_records_latency():
    from company_search.utils.timing import TimingContext, get_latency_tracker, timed

    @timed("unit.op")
    def work():
        return 42

    assert work() == 42
    with TimingContext("unit.block"):
        pass

    stats = get_latency_tracker().get_stats()
    assert stats["unit.op"]["count"] == 1
    assert stats["unit.block"]["count"] == 1
    assert get_latency_tracker().get_stats("nothing") == {}


def test_setup_logging_replaces_handler():
    import io
    import logging

    from company_search.utils.logging import get_logger, setup_logging

    first, second = io.StringIO(), io.StringIO()
    setup_logging("INFO", stream=first)
    root = setup_logging("INFO", stream=second)
    get_logger("tests").info("hello")

    assert len(root.handlers) == 1
    assert logging.getLogger("company_search.tests") is get_logger("tests")
    assert first.getvalue() == ""
    assert "hello" in second.getvalue()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
