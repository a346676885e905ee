import logging

from pdf_sign_mcp import config


def test_output_prefix_default(monkeypatch):
    monkeypatch.delenv(config.OUTPUT_PREFIX_ENV, raising=False)
    assert config.get_output_prefix() == config.DEFAULT_OUTPUT_PREFIX


def test_output_prefix_env_override(monkeypatch):
    monkeypatch.setenv(config.OUTPUT_PREFIX_ENV, "final-")
    assert config.get_output_prefix() == "final-"


def test_log_level_default(monkeypatch):
    monkeypatch.delenv(config.LOG_LEVEL_ENV, raising=False)
    assert config.get_log_level() == logging.WARNING


def test_log_level_by_name(monkeypatch):
    monkeypatch.setenv(config.LOG_LEVEL_ENV, "debug")
    assert config.get_log_level() == logging.DEBUG


def test_log_level_numeric(monkeypatch):
    monkeypatch.setenv(config.LOG_LEVEL_ENV, "15")
    assert config.get_log_level() == 15


def test_log_level_unknown_falls_back(monkeypatch):
    monkeypatch.setenv(config.LOG_LEVEL_ENV, "chatty")
    assert config.get_log_level() == logging.WARNING


def test_version_is_exposed():
    import pdf_sign_mcp

    assert pdf_sign_mcp.__version__ == "0.1.0"
