"""Tests for environment-driven settings."""
from pathlib import Path

import pytest
from pydantic import ValidationError

from route_sketch.config import Settings, default_store_path


def test_defaults():
    s = Settings()
    assert s.store_path == default_store_path()
    assert s.search_radius_km == 5.0
    assert s.log_level == "INFO"
    assert s.principal is None


def test_from_env_reads_prefixed_variables(tmp_path):
    env = {
        "ROUTE_SKETCH_STORE_PATH": str(tmp_path / "r.json"),
        "ROUTE_SKETCH_PRINCIPAL": "u1",
        "ROUTE_SKETCH_SEARCH_RADIUS_KM": "2.5",
        "ROUTE_SKETCH_LOG_LEVEL": "debug",
        "UNRELATED": "x",
    }
    s = Settings.from_env(env)
    assert s.store_path == Path(tmp_path / "r.json")
    assert s.principal == "u1"
    assert s.search_radius_km == 2.5
    assert s.log_level == "DEBUG"


def test_memory_store_path():
    assert Settings.from_env({"ROUTE_SKETCH_STORE_PATH": "memory"}).store_path is None


def test_invalid_radius_rejected():
    with pytest.raises(ValidationError):
        Settings.from_env({"ROUTE_SKETCH_SEARCH_RADIUS_KM": "0"})
