"""Create a local .env for the portfolio API from .env.example."""

from __future__ import annotations

import argparse
import os
import secrets
import sys
from pathlib import Path

SECRET_KEYS = ("JWT_SECRET",)
DEV_CORS_ORIGINS = "http://localhost:3000,http://localhost:5173"


def _is_placeholder(value: str) -> bool:
    return "CHANGE_ME" in value or value.strip() == ""


def _parse_kv_line(line: str) -> tuple[str, str] | None:
    if "=" not in line or line.lstrip().startswith("#"):
        return None
    key, _, value = line.partition("=")
    return key.strip(), value.strip()


def read_template(lines: list[str]) -> dict[str, str]:
    return dict(parsed for parsed in map(_parse_kv_line, lines) if parsed)


def build_values(
    template: dict[str, str],
    *,
    db_host: str,
    db_port: str,
    rotate: bool,
    dev_cors: bool,
) -> dict[str, str]:
    """
    Values to substitute into the template.

    Placeholder passwords and secrets are replaced with random ones; with
    ``rotate`` every secret is regenerated.
    """
    user = template.get("POSTGRES_USER", "postgres")
    database = template.get("POSTGRES_DB", "folio")
    password = template.get("POSTGRES_PASSWORD", "")
    if rotate or _is_placeholder(password):
        password = secrets.token_urlsafe(24)

    values = {
        "POSTGRES_USER": user,
        "POSTGRES_PASSWORD": password,
        "POSTGRES_DB": database,
        "DATABASE_URL": f"postgresql+asyncpg://{user}:{password}@{db_host}:{db_port}/{database}",
    }
    for key in SECRET_KEYS:
        current = template.get(key, "")
        values[key] = secrets.token_urlsafe(32) if rotate or _is_placeholder(current) else current

    if dev_cors:
        values["CORS_ORIGINS"] = DEV_CORS_ORIGINS
        # Local development runs over plain http.
        values["COOKIE_SECURE"] = "false"

    return {key: value for key, value in values.items() if key in template}


def render(template_lines: list[str], values: dict[str, str]) -> str:
    rendered: list[str] = []
    for line in template_lines:
        parsed = _parse_kv_line(line)
        if parsed and parsed[0] in values:
            rendered.append(f"{parsed[0]}={values[parsed[0]]}\n")
        else:
            rendered.append(line)
    return "".join(rendered)


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a .env file from .env.example")
    parser.add_argument("--path", default=None, help="Output path for .env (default: repo root/.env)")
    parser.add_argument("--db-host", default="db", help="Database host for DATABASE_URL (default: db)")
    parser.add_argument("--db-port", default="5432", help="Database port for DATABASE_URL (default: 5432)")
    parser.add_argument("--local", action="store_true", help="Use localhost for DATABASE_URL host")
    parser.add_argument("--rotate", action="store_true", help="Regenerate secrets even if already set")
    parser.add_argument("--dev-cors", action="store_true", help="Use local dev CORS origins and plain-http cookies")
    parser.add_argument("--force", action="store_true", help="Overwrite existing .env if present")
    args = parser.parse_args()

    repo_root = Path(__file__).resolve().parents[2]
    template_path = repo_root / ".env.example"
    if not template_path.exists():
        print(f"Template not found: {template_path}", file=sys.stderr)
        return 1

    env_path = Path(args.path) if args.path else repo_root / ".env"
    if env_path.exists() and not args.force:
        print(f"{env_path} already exists. Use --force to overwrite.", file=sys.stderr)
        return 1

    template_lines = template_path.read_text(encoding="utf-8").splitlines(keepends=True)
    values = build_values(
        read_template(template_lines),
        db_host="localhost" if args.local else args.db_host,
        db_port=args.db_port,
        rotate=args.rotate,
        dev_cors=args.dev_cors,
    )
    env_path.write_text(render(template_lines, values), encoding="utf-8")

    if os.name != "nt":
        try:
            env_path.chmod(0o600)
        except OSError:
            print(f"Could not restrict permissions on {env_path}", file=sys.stderr)

    print(f"Wrote {env_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
