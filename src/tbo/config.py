from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional
import os
import sys


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    logs_dir: Path
    exports_dir: Path


@dataclass(frozen=True)
class Settings:
    users: dict[str, str] = field(default_factory=lambda: {"Amir": "password", "Jack": "password"})
    expense_holder: str = "Jack"
    balance_preview_limit: int = 10
    page_size: int = 10
    seed_demo: bool = True


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def get_app_paths(app_name: str = "TradingBackOffice") -> AppPaths:
    if sys.platform.startswith("win"):
        base = _windows_appdata() / app_name
    elif sys.platform == "darwin":
        base = _mac_app_support() / app_name
    else:
        base = Path.home() / f".{app_name.lower()}"

    logs = base / "logs"
    exports = base / "exports"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)
    exports.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, logs_dir=logs, exports_dir=exports)


def _parse_users(raw: str) -> dict[str, str]:
    # "name:secret,name2:secret2"
    users: dict[str, str] = {}
    for chunk in raw.split(","):
        name, sep, secret = chunk.strip().partition(":")
        if not sep or not name.strip() or not secret:
            continue
        users[name.strip()] = secret
    return users


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() not in {"0", "false", "no", "off", ""}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    defaults = Settings()

    users = _parse_users(env.get("TBO_USERS", "")) or defaults.users
    holder = env.get("TBO_EXPENSE_HOLDER", "").strip() or defaults.expense_holder
    seed = _parse_bool(env["TBO_SEED_DEMO"]) if "TBO_SEED_DEMO" in env else defaults.seed_demo

    return Settings(
        users=users,
        expense_holder=holder,
        balance_preview_limit=defaults.balance_preview_limit,
        page_size=defaults.page_size,
        seed_demo=seed,
    )
