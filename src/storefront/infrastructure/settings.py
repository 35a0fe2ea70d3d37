"""Runtime configuration read from the environment.

Every value has a default that works for a local checkout of the repo,
so nothing needs to be set to try the CLI.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_DEFAULT_DATA_DIR = _PROJECT_ROOT / "data"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str
    data_dir: Path
    lock_timeout_seconds: float = 5.0
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        data_dir = Path(env.get("STOREFRONT_DATA_DIR", str(_DEFAULT_DATA_DIR)))
        return cls(
            database_url=env.get(
                "STOREFRONT_DATABASE_URL", f"sqlite:///{data_dir / 'storefront.db'}"
            ),
            data_dir=data_dir,
            lock_timeout_seconds=float(env.get("STOREFRONT_LOCK_TIMEOUT", "5.0")),
            log_level=env.get("STOREFRONT_LOG_LEVEL", "INFO").upper(),
            log_json=env.get("STOREFRONT_LOG_JSON", "false").lower() in _TRUTHY,
        )
