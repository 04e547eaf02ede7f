from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

BASE_DIR = Path(__file__).parent
LEDGER_PATH_ENV = "PASSPORT_LEDGER_PATH"


def _load_dotenv() -> None:
    repo_root = Path(__file__).resolve().parents[2]
    candidates = [repo_root / ".env", Path.cwd() / ".env"]
    for env_path in candidates:
        if not env_path.exists():
            continue
        try:
            for line in env_path.read_text().splitlines():
                stripped = line.strip()
                if not stripped or stripped.startswith("#") or "=" not in stripped:
                    continue
                key, value = stripped.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value
        except OSError:
            continue
        break


_load_dotenv()


@dataclass(frozen=True)
class LedgerConfig:
    # "memory" keeps records for the lifetime of the process only.
    backend: str = os.getenv("PASSPORT_LEDGER_BACKEND", "json").strip().lower()
    path: Path = BASE_DIR / "data" / "ledger.json"


@dataclass(frozen=True)
class AppConfig:
    log_level: str = os.getenv("PASSPORT_VALIDATION_LOG_LEVEL", "INFO").upper()
    ledger: LedgerConfig = field(default_factory=LedgerConfig)


CONFIG = AppConfig()


def resolve_ledger_path(override: Optional[str] = None) -> Path:
    if override:
        return Path(override)
    env_value = os.getenv(LEDGER_PATH_ENV)
    if env_value:
        return Path(env_value)
    return CONFIG.ledger.path
