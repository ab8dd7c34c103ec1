"""Configuration loader for billing, seed and authentication settings."""

from __future__ import annotations

import logging
import os
import secrets
import sys
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BillingConfig:
    household_fee: int
    commercial_income: int
    total_salaries: int
    salary_source: str


@dataclass(frozen=True)
class RepositoryConfig:
    latency_ms: int


@dataclass(frozen=True)
class SeedConfig:
    household_count: int
    paid_ratio: float
    random_seed: int | None


@dataclass(frozen=True)
class AuthConfig:
    admin_username: str
    admin_password_env: str
    otp_ttl_seconds: int
    otp_max_attempts: int


@dataclass(frozen=True)
class LoggingConfig:
    level: str


@dataclass(frozen=True)
class AppConfig:
    billing: BillingConfig
    repository: RepositoryConfig
    seed: SeedConfig
    auth: AuthConfig
    logging: LoggingConfig


SALARY_SOURCES = {"fixed", "staff"}
DEFAULT_CONFIG_REL_PATH = Path("config/settings.yaml")
DEFAULT_ADMIN_PASSWORD_ENV = "WASTEPAY_ADMIN_PASSWORD"
RUNTIME_ENV_REL_PATH = Path("config/runtime.env")
_RUNTIME_ENV_LOADED = False


def _split_key_value(raw_line: str) -> tuple[str, str] | None:
    """Parse a shell or PowerShell key assignment line."""
    line = raw_line.strip()
    if not line or line.startswith("#"):
        return None

    if line.startswith("$env:"):
        line = line[len("$env:") :]
    elif line.startswith("export "):
        line = line[len("export ") :]

    if "=" not in line:
        return None

    key, value = line.split("=", 1)
    key = key.strip()
    value = value.strip()
    if not key:
        return None

    if (value.startswith("'") and value.endswith("'")) or (
        value.startswith('"') and value.endswith('"')
    ):
        value = value[1:-1]

    return key, value


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def _runtime_root() -> Path:
    """Return writable root for runtime env creation."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return _project_root()


def _iter_env_candidates() -> list[Path]:
    """Return candidate files that may contain runtime secrets."""
    roots: list[Path] = [Path.cwd(), _project_root()]
    if getattr(sys, "frozen", False):
        roots.insert(0, Path(sys.executable).resolve().parent)

    unique: list[Path] = []
    seen: set[Path] = set()
    for root in roots:
        for path in (root / ".env.local", root / RUNTIME_ENV_REL_PATH):
            resolved = path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            unique.append(resolved)
    return unique


def _load_env_from_file(path: Path) -> None:
    """Load KEY=VALUE lines from a local file into process environment."""
    if not path.exists() or not path.is_file():
        return
    with path.open("r", encoding="utf-8") as file:
        for line in file:
            parsed = _split_key_value(line)
            if not parsed:
                continue
            key, value = parsed
            if key not in os.environ:
                os.environ[key] = value


def _ensure_runtime_env_loaded() -> None:
    """Load local env files once per process."""
    global _RUNTIME_ENV_LOADED
    if _RUNTIME_ENV_LOADED:
        return
    for path in _iter_env_candidates():
        _load_env_from_file(path)
    _RUNTIME_ENV_LOADED = True


def _write_runtime_env(name: str, value: str) -> Path:
    """Append a generated secret to config/runtime.env."""
    path = _runtime_root() / RUNTIME_ENV_REL_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as file:
        file.write(f"{name}='{value}'\n")
    return path


def ensure_admin_password(name: str = DEFAULT_ADMIN_PASSWORD_ENV) -> str:
    """Return the admin password, generating and persisting one if missing."""
    _ensure_runtime_env_loaded()
    value = os.getenv(name)
    if value:
        return value

    value = secrets.token_urlsafe(12)
    os.environ[name] = value
    path = _write_runtime_env(name, value)
    logger.warning("Generated admin password stored in %s", path)
    return value


def resolve_default_config_path() -> Path:
    """Resolve configuration path for source and packaged execution."""
    env_path = os.getenv("WASTEPAY_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    candidates: list[Path] = []

    if getattr(sys, "frozen", False):
        exe_dir = Path(sys.executable).resolve().parent
        candidates.append(exe_dir / DEFAULT_CONFIG_REL_PATH)

    candidates.append(Path.cwd() / DEFAULT_CONFIG_REL_PATH)
    candidates.append(_project_root() / DEFAULT_CONFIG_REL_PATH)

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return candidates[0]


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load the app configuration from YAML."""
    path = config_path or resolve_default_config_path()
    with path.open("r", encoding="utf-8") as file:
        raw = yaml.safe_load(file) or {}

    billing = raw["billing"]
    salary_source = str(billing.get("salary_source", "fixed"))
    if salary_source not in SALARY_SOURCES:
        raise ValueError(f"Unsupported billing.salary_source: {salary_source}")

    seed = raw.get("seed", {})
    random_seed = seed.get("random_seed")
    auth = raw.get("auth", {})

    return AppConfig(
        billing=BillingConfig(
            household_fee=int(billing["household_fee"]),
            commercial_income=int(billing["commercial_income"]),
            total_salaries=int(billing["total_salaries"]),
            salary_source=salary_source,
        ),
        repository=RepositoryConfig(
            latency_ms=int(raw.get("repository", {}).get("latency_ms", 200)),
        ),
        seed=SeedConfig(
            household_count=int(seed.get("household_count", 2500)),
            paid_ratio=float(seed.get("paid_ratio", 0.7)),
            random_seed=int(random_seed) if random_seed is not None else None,
        ),
        auth=AuthConfig(
            admin_username=str(auth.get("admin_username", "admin")),
            admin_password_env=str(auth.get("admin_password_env", DEFAULT_ADMIN_PASSWORD_ENV)),
            otp_ttl_seconds=int(auth.get("otp_ttl_seconds", 300)),
            otp_max_attempts=int(auth.get("otp_max_attempts", 3)),
        ),
        logging=LoggingConfig(
            level=str(raw.get("logging", {}).get("level", "INFO")).upper(),
        ),
    )
