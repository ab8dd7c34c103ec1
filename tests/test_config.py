from __future__ import annotations

from pathlib import Path

import pytest

from wastepay_app.core import config as app_config


def test_admin_password_loads_from_local_env_file(monkeypatch, tmp_path: Path) -> None:
    env_file = tmp_path / ".env.local"
    env_file.write_text("export WASTEPAY_ADMIN_PASSWORD='from-file'\n", encoding="utf-8")

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WASTEPAY_ADMIN_PASSWORD", raising=False)
    monkeypatch.setattr(app_config, "_RUNTIME_ENV_LOADED", False)
    monkeypatch.setattr(app_config, "_iter_env_candidates", lambda: [env_file])

    assert app_config.ensure_admin_password() == "from-file"


def test_admin_password_bootstraps_runtime_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WASTEPAY_ADMIN_PASSWORD", raising=False)
    monkeypatch.setattr(app_config, "_RUNTIME_ENV_LOADED", False)
    monkeypatch.setattr(app_config, "_runtime_root", lambda: tmp_path)
    monkeypatch.setattr(app_config, "_iter_env_candidates", lambda: [])

    password = app_config.ensure_admin_password()

    runtime_env = tmp_path / "config" / "runtime.env"
    assert runtime_env.exists()
    assert f"WASTEPAY_ADMIN_PASSWORD='{password}'" in runtime_env.read_text(encoding="utf-8")
    assert password


def test_split_key_value_formats() -> None:
    assert app_config._split_key_value("$env:KEY='value'") == ("KEY", "value")
    assert app_config._split_key_value('KEY="a=b"') == ("KEY", "a=b")
    assert app_config._split_key_value("# comment") is None
    assert app_config._split_key_value("no-assignment") is None


def test_load_config_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text(
        "billing:\n"
        "  household_fee: 120\n"
        "  commercial_income: 40000\n"
        "  total_salaries: 30000\n"
        "  salary_source: staff\n"
        "repository:\n"
        "  latency_ms: 50\n"
        "seed:\n"
        "  household_count: 10\n"
        "  random_seed: 3\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )

    config = app_config.load_config(path)

    assert config.billing.household_fee == 120
    assert config.billing.salary_source == "staff"
    assert config.repository.latency_ms == 50
    assert config.seed.household_count == 10
    assert config.seed.paid_ratio == 0.7
    assert config.seed.random_seed == 3
    assert config.auth.otp_max_attempts == 3
    assert config.logging.level == "DEBUG"


def test_load_config_rejects_unknown_salary_source(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text(
        "billing:\n"
        "  household_fee: 100\n"
        "  commercial_income: 50000\n"
        "  total_salaries: 34000\n"
        "  salary_source: payroll\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError):
        app_config.load_config(path)


def test_resolve_config_path_from_env(monkeypatch, tmp_path: Path) -> None:
    target = tmp_path / "custom.yaml"
    monkeypatch.setenv("WASTEPAY_CONFIG_PATH", str(target))

    assert app_config.resolve_default_config_path() == target


def test_bundled_settings_load() -> None:
    config = app_config.load_config(Path(__file__).resolve().parents[1] / "config" / "settings.yaml")

    assert config.billing.household_fee == 100
    assert config.billing.total_salaries == 34000
    assert config.auth.admin_username == "Anzar24"
