from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()

APP_VERSION = "1.0.0"


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


def _resolve_path(raw: str) -> Path:
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _parse_origins(raw: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


@dataclass(frozen=True)
class Settings:
    tasks_file: Path
    log_level: str = "INFO"
    log_dir: str = "logs"
    api_host: str = "127.0.0.1"
    api_port: int = 3000
    allowed_origins: tuple[str, ...] = ("*",)
    static_dir: Path | None = None
    strict_writes: bool = False


def load_settings() -> Settings:
    static_dir = os.getenv("STATIC_DIR", "").strip()
    return Settings(
        tasks_file=_resolve_path(os.getenv("TASKS_FILE", "tasks.json").strip() or "tasks.json"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=os.getenv("LOG_DIR", "logs"),
        api_host=os.getenv("API_HOST", "127.0.0.1"),
        api_port=int(os.getenv("API_PORT", "3000")),
        allowed_origins=_parse_origins(os.getenv("ALLOWED_ORIGINS", "*")) or ("*",),
        static_dir=_resolve_path(static_dir) if static_dir else None,
        strict_writes=_parse_bool(os.getenv("STRICT_WRITES", "false")),
    )


load_env()

SETTINGS = load_settings()
