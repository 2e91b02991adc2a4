"""
Tests for environment-driven configuration.
"""

import importlib

from decision_graph import config
from decision_graph.serialization import format_for_path


def test_defaults(monkeypatch):
    monkeypatch.delenv("DECISION_GRAPH_LOG_LEVEL", raising=False)
    monkeypatch.delenv("DECISION_GRAPH_FORMAT", raising=False)
    importlib.reload(config)
    assert config.LOG_LEVEL == "WARNING"
    assert config.DEFAULT_FORMAT == "json"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DECISION_GRAPH_LOG_LEVEL", "debug")
    monkeypatch.setenv("DECISION_GRAPH_FORMAT", "YAML")
    try:
        importlib.reload(config)
        assert config.LOG_LEVEL == "DEBUG"
        assert config.DEFAULT_FORMAT == "yaml"
        assert format_for_path("graph.txt") == "yaml"
    finally:
        monkeypatch.delenv("DECISION_GRAPH_LOG_LEVEL")
        monkeypatch.delenv("DECISION_GRAPH_FORMAT")
        importlib.reload(config)
