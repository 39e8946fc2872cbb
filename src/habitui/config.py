# src/habitui/config.py

"""Settings loaded once from the environment (+ the config dir's .env file).

Design goals:
- One Settings object, built in the CLI entrypoint and passed down explicitly.
- No secrets required at import time, and no module-level settings instance.
- Credentials are only demanded when the remote backend is actually built.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

from .errors import ConfigurationMissing

ENV_PREFIX = "HABITUI"
CONFIG_SUBDIR = Path(".config") / "habitui"

DEFAULT_API_BASE_URL = "https://habitica.com/api/v3"
BACKENDS = ("local", "remote")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def default_config_dir(environ: Mapping[str, str]) -> Path:
    """
    ~/.config/habitui of the invoking user.

    Under sudo the config of the original user is used, not root's.
    """
    explicit = environ.get(_k("CONFIG_DIR"), "").strip()
    if explicit:
        return Path(explicit).expanduser()

    sudo_user = environ.get("SUDO_USER", "").strip()
    if sudo_user:
        return Path("/home") / sudo_user / CONFIG_SUBDIR

    home = environ.get("HOME", "").strip()
    if home:
        return Path(home) / CONFIG_SUBDIR
    return Path.home() / CONFIG_SUBDIR


def _first_env(env: Mapping[str, str], *names: str, default: str | None = None) -> str | None:
    for n in names:
        v = env.get(n)
        if v is not None and v.strip() != "":
            return v.strip()
    return default


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(env: Mapping[str, str], name: str, default: Path) -> Path:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    debug: bool
    dark_mode: bool

    # ---- Backend selection ----
    backend: str

    # ---- Habitica API ----
    api_base_url: str
    habitica_user_id: str | None
    habitica_token: str | None
    habitica_xclient: str | None

    # ---- Local data paths ----
    config_dir: Path
    db_path: Path
    local_tasks_path: Path
    local_completed_path: Path
    local_latency_ms: int

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from `environ` (default: os.environ) layered over
        <config_dir>/.env. Values from the process environment win.
        """
        process_env = dict(os.environ if environ is None else environ)
        config_dir = default_config_dir(process_env)

        env: dict[str, str] = {}
        dotenv_file = config_dir / ".env"
        if dotenv_file.is_file():
            env.update({k: v for k, v in dotenv_values(dotenv_file).items() if v is not None})
        env.update(process_env)

        debug = _env_bool(env, _k("DEBUG"), False)
        log_level = (env.get(_k("LOG_LEVEL")) or ("DEBUG" if debug else "WARNING")).upper()

        backend = (env.get(_k("BACKEND")) or ("local" if debug else "remote")).strip().lower()
        if backend not in BACKENDS:
            raise ValueError(f"{_k('BACKEND')} must be one of {BACKENDS}, got {backend!r}")

        return Settings(
            app_name="habitui",
            log_level=log_level,
            debug=debug,
            dark_mode=_env_bool(env, _k("DARK_MODE"), False),
            backend=backend,
            api_base_url=_first_env(env, _k("API_BASE_URL"), default=DEFAULT_API_BASE_URL),
            habitica_user_id=_first_env(env, _k("USER_ID"), "HABITICA_USER_ID"),
            habitica_token=_first_env(env, _k("TOKEN"), "HABITICA_TOKEN"),
            habitica_xclient=_first_env(env, _k("XCLIENT"), "HABITICA_XCLIENT"),
            config_dir=config_dir,
            db_path=_env_path(env, _k("DB_PATH"), config_dir / "habitui.sqlite3"),
            local_tasks_path=_env_path(env, _k("TASKS_JSON"), config_dir / "habitica_tasks.json"),
            local_completed_path=_env_path(
                env, _k("COMPLETED_JSON"), config_dir / "habitica_completed.json"
            ),
            local_latency_ms=max(0, _env_int(env, _k("LOCAL_LATENCY_MS"), 0)),
        )

    def require_credentials(self) -> tuple[str, str, str]:
        """Return (user_id, token, xclient) or fail listing every missing variable."""
        missing = []
        if not self.habitica_user_id:
            missing.append("HABITICA_USER_ID")
        if not self.habitica_token:
            missing.append("HABITICA_TOKEN")
        if not self.habitica_xclient:
            missing.append("HABITICA_XCLIENT")
        if missing:
            raise ConfigurationMissing(missing)
        return str(self.habitica_user_id), str(self.habitica_token), str(self.habitica_xclient)
