"""Runtime settings, read from the environment.

CLI options override these values; see ``scicalc.cli``.
"""

import os
from dataclasses import dataclass, field, replace

DEFAULT_DB_PATH = "./data/history.sqlite3"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass
class Settings:
    db_path: str = DEFAULT_DB_PATH
    history_limit: int = 20  # rows served by GET /api/history
    local_history_size: int = 10  # recent entries kept per session
    secret_key: str = field(default="dev-secret-change-me", repr=False)
    user_header: str = ""  # trusted proxy header carrying the user id; "" disables it
    max_sessions: int = 1000  # calculator sessions kept in memory (LRU)
    log_level: str = "INFO"
    background_saves: bool = True  # False saves inline, before the response

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            db_path=os.environ.get("SCICALC_DB_PATH", DEFAULT_DB_PATH),
            history_limit=_env_int("SCICALC_HISTORY_LIMIT", 20),
            local_history_size=_env_int("SCICALC_LOCAL_HISTORY_SIZE", 10),
            secret_key=os.environ.get("SCICALC_SECRET_KEY", "dev-secret-change-me"),
            user_header=os.environ.get("SCICALC_USER_HEADER", ""),
            max_sessions=_env_int("SCICALC_MAX_SESSIONS", 1000),
            log_level=os.environ.get("SCICALC_LOG_LEVEL", "INFO").upper(),
        )

    def with_overrides(self, **overrides) -> "Settings":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
