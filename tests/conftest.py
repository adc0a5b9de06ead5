"""Shared fixtures for the cmdx test suite."""

import pytest

CMDX_ENV_VARS = (
    "CMDX_FROM",
    "CMDX_TO",
    "CMDX_PACKAGE_MANAGER",
    "CMDX_JSON",
    "CMDX_NO_COLOR",
    "CMDX_DEBUG",
    "NO_COLOR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's own cmdx settings out of the tests."""
    for var in CMDX_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def config(tmp_path):
    """A Config stored in a temporary directory with highlighting off."""
    from cmdx.config import Config

    cfg = Config(config_dir=str(tmp_path))
    cfg.settings["highlight"] = False
    return cfg
