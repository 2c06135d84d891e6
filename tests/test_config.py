"""Tests for environment configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from gitcompare.config import CompareConfig, load_config
from gitcompare.models.comparison import ComparisonMode

ENV_VARS = ["GITCOMPARE_STATE_DIR", "GITCOMPARE_DEFAULT_MODE", "GITCOMPARE_PAGE_SIZE", "GITCOMPARE_LOG_LEVEL"]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a stray .env in the working directory out of the way
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_defaults(clean_env):
    config = load_config()

    assert config.default_mode is ComparisonMode.BRANCH
    assert config.page_size == 20
    assert config.log_level == "INFO"
    assert config.state_dir == Path.home() / ".cache" / "gitcompare"


def test_environment_overrides(clean_env, tmp_path):
    clean_env.setenv("GITCOMPARE_STATE_DIR", str(tmp_path / "state"))
    clean_env.setenv("GITCOMPARE_DEFAULT_MODE", "working")
    clean_env.setenv("GITCOMPARE_PAGE_SIZE", "5")
    clean_env.setenv("GITCOMPARE_LOG_LEVEL", "debug")

    config = load_config()

    assert config.state_dir == tmp_path / "state"
    assert config.default_mode is ComparisonMode.WORKING
    assert config.page_size == 5
    assert config.log_level == "DEBUG"


def test_invalid_values_are_rejected(clean_env):
    clean_env.setenv("GITCOMPARE_DEFAULT_MODE", "sideways")
    with pytest.raises(ValidationError):
        load_config()

    with pytest.raises(ValidationError):
        CompareConfig(page_size=-1)
