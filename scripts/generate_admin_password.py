"""Generate the administrator password env line for WastePay."""

from __future__ import annotations

import argparse
import getpass
import secrets
from pathlib import Path

from wastepay_app.core.config import DEFAULT_ADMIN_PASSWORD_ENV


def _render_line(name: str, value: str, env_format: str) -> str:
    if env_format == "powershell":
        return f"$env:{name}='{value}'"
    if env_format == "shell-export":
        return f"export {name}='{value}'"
    return f"{name}='{value}'"


def _write_env_file(path: Path, name: str, password: str, env_format: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_render_line(name, password, env_format) + "\n", encoding="utf-8")


def main(argv: list[str] | None = None) -> None:
    """Generate or prompt for a password and optionally write/print the env line."""
    parser = argparse.ArgumentParser(description="Set the WastePay administrator password.")
    parser.add_argument(
        "--write-env",
        default=None,
        help="Path to write the env line, e.g. .env.local. Omit to skip file output.",
    )
    parser.add_argument(
        "--name",
        default=DEFAULT_ADMIN_PASSWORD_ENV,
        help="Environment variable holding the password.",
    )
    parser.add_argument(
        "--format",
        choices=["shell", "shell-export", "powershell"],
        default="shell",
        help="Output format for written/printed lines.",
    )
    parser.add_argument(
        "--prompt",
        action="store_true",
        help="Read the password from the terminal instead of generating one.",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Also print the env line to stdout.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing env file.",
    )
    args = parser.parse_args(argv)

    password = getpass.getpass("Admin password: ") if args.prompt else secrets.token_urlsafe(12)
    if not password:
        parser.error("password must not be empty")

    if args.write_env:
        target_path = Path(args.write_env)
        if target_path.exists() and not args.force:
            print(f"[INFO] env file already exists: {target_path}")
            return
        _write_env_file(target_path, args.name, password, args.format)
        print(f"[INFO] env file written: {target_path}")

    if args.stdout:
        print(_render_line(args.name, password, args.format))


if __name__ == "__main__":
    main()
