"""Configuration hierarchy: defaults, environment file, overrides, env vars."""

import pytest

from hireboard.core.config.loader import ConfigLoader
from hireboard.core.storage.factory import create_backend
from hireboard.core.storage.memory_store import MemoryStore
from hireboard.core.storage.simulated import SimulatedNetworkBackend


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    for key in ("HIREBOARD_ENV", "HIREBOARD_BACKEND_URL", "HIREBOARD_SIMULATION_ENABLED",
                "HIREBOARD_SIMULATION_ERRORRATE", "HIREBOARD_UI_JOBS_PAGESIZE"):
        monkeypatch.delenv(key, raising=False)
    (tmp_path / "default.yaml").write_text(
        "backend:\n"
        "  kind: memory\n"
        "  url: null\n"
        "simulation:\n"
        "  enabled: false\n"
        "  errorrate: 0.08\n"
        "ui:\n"
        "  jobs:\n"
        "    pagesize: 10\n"
    )
    (tmp_path / "environments").mkdir()
    (tmp_path / "environments" / "staging.yaml").write_text(
        "backend:\n  kind: rest\n  url: https://staging.example.co\n"
    )
    return tmp_path


def test_defaults(config_dir):
    config = ConfigLoader(config_dir).load()

    assert config["backend"] == {"kind": "memory", "url": None}
    assert config["ui"]["jobs"]["pagesize"] == 10


def test_environment_file_is_merged(config_dir, monkeypatch):
    monkeypatch.setenv("HIREBOARD_ENV", "staging")

    config = ConfigLoader(config_dir).load()

    assert config["backend"] == {"kind": "rest", "url": "https://staging.example.co"}
    assert config["simulation"]["errorrate"] == 0.08


def test_overrides_then_env_vars(config_dir, monkeypatch):
    monkeypatch.setenv("HIREBOARD_SIMULATION_ENABLED", "yes")
    monkeypatch.setenv("HIREBOARD_SIMULATION_ERRORRATE", "0.5")
    monkeypatch.setenv("HIREBOARD_UI_JOBS_PAGESIZE", "25")

    config = ConfigLoader(config_dir).load({"ui": {"jobs": {"pagesize": 5}}, "backend": {"kind": "x"}})

    assert config["backend"]["kind"] == "x"
    assert config["simulation"] == {"enabled": True, "errorrate": 0.5}
    assert config["ui"]["jobs"]["pagesize"] == 25


def test_missing_directory_loads_empty(tmp_path):
    assert ConfigLoader(tmp_path / "nowhere").load() == {}


def test_create_backend_memory_and_simulated():
    assert isinstance(create_backend({"backend": {"kind": "memory"}}), MemoryStore)

    backend = create_backend(
        {
            "backend": {"kind": "memory"},
            "simulation": {"enabled": True, "mindelay": 0, "maxdelay": 0, "errorrate": 1.0},
        }
    )
    assert isinstance(backend, SimulatedNetworkBackend)
    assert isinstance(backend.inner, MemoryStore)
    assert backend.error_rate == 1.0


def test_create_backend_unknown_kind():
    with pytest.raises(ValueError):
        create_backend({"backend": {"kind": "sqlite"}})
