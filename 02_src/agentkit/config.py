"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "agentkit.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_AGENTS_DIR = Path(".claude") / "agents"


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


@dataclass
class Settings:
    """Runtime settings for the orchestration engine."""

    db_path: PathLike = DEFAULT_DB_PATH
    worker: str = "cli"
    cli_path: str = "claude"
    working_dir: Path | None = None
    default_model: str = DEFAULT_MODEL
    max_retries: int = 3
    timeout_seconds: float = 600.0
    agents_dir: Path = DEFAULT_AGENTS_DIR
    resume_sessions: bool = True
    checkpoint_state: bool = False
    daily_budget: int | None = None
    budget_warning: float = 0.8

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        working_dir = os.getenv("AGENTKIT_WORKING_DIR")

        settings = cls(
            db_path=resolve_db_path(os.getenv("DATABASE_URL")),
            worker=os.getenv("AGENTKIT_WORKER", "cli").strip().lower(),
            cli_path=os.getenv("AGENTKIT_CLI_PATH", "claude"),
            working_dir=Path(working_dir) if working_dir else None,
            default_model=os.getenv("AGENTKIT_DEFAULT_MODEL", DEFAULT_MODEL),
            max_retries=_env_int("AGENTKIT_MAX_RETRIES", 3),
            timeout_seconds=_env_float("AGENTKIT_TIMEOUT_SECONDS", 600.0),
            agents_dir=Path(os.getenv("AGENTKIT_AGENTS_DIR", str(DEFAULT_AGENTS_DIR))),
            resume_sessions=_env_bool("AGENTKIT_RESUME_SESSIONS", default=True),
            checkpoint_state=_env_bool("AGENTKIT_CHECKPOINT_STATE", default=False),
            daily_budget=_env_int("AGENTKIT_DAILY_BUDGET", None),
            budget_warning=_env_float("AGENTKIT_BUDGET_WARNING", 0.8),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Raise ValueError on settings the engine cannot run with."""
        if self.worker not in {"cli", "anthropic"}:
            raise ValueError(
                f"AGENTKIT_WORKER must be 'cli' or 'anthropic', got {self.worker!r}"
            )
        if self.max_retries < 0:
            raise ValueError("AGENTKIT_MAX_RETRIES must be >= 0.")
        if self.timeout_seconds <= 0:
            raise ValueError("AGENTKIT_TIMEOUT_SECONDS must be > 0.")
        if self.daily_budget is not None and self.daily_budget <= 0:
            raise ValueError("AGENTKIT_DAILY_BUDGET must be a positive integer.")
        if not 0 < self.budget_warning <= 1:
            raise ValueError("AGENTKIT_BUDGET_WARNING must be in (0, 1].")


def _env_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as error:
        raise ValueError(f"Invalid integer value for {name}: {value!r}") from error


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as error:
        raise ValueError(f"Invalid float value for {name}: {value!r}") from error


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
