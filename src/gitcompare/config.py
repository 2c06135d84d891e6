"""Runtime configuration read from the environment."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from gitcompare.models.comparison import ComparisonMode


class CompareConfig(BaseModel):
    """Settings for the gitcompare command line."""

    state_dir: Path = Field(
        default_factory=lambda: Path.home() / ".cache" / "gitcompare",
        description="Directory of the persisted comparison state",
    )
    default_mode: ComparisonMode = Field(ComparisonMode.BRANCH, description="Initial comparison mode")
    page_size: int = Field(20, ge=0, description="Commits per page; 0 fetches all")
    log_level: str = Field("INFO", description="loguru level for stderr output")

    @field_validator("log_level")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()


def load_config() -> CompareConfig:
    """Build the configuration from GITCOMPARE_* variables, honoring a .env file."""
    load_dotenv()

    values = {}
    if state_dir := os.getenv("GITCOMPARE_STATE_DIR"):
        values["state_dir"] = Path(state_dir).expanduser()
    if default_mode := os.getenv("GITCOMPARE_DEFAULT_MODE"):
        values["default_mode"] = default_mode
    if page_size := os.getenv("GITCOMPARE_PAGE_SIZE"):
        values["page_size"] = page_size
    if log_level := os.getenv("GITCOMPARE_LOG_LEVEL"):
        values["log_level"] = log_level

    return CompareConfig(**values)
