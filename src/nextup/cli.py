"""Command-line interface for serving the NextUp front end."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from dataclasses import asdict

from nextup.config.positions import (
    POSITION_ALIASES,
    display_name,
    iter_positions,
    normalize_position,
    stat_fields_for,
)
from nextup.config_loader import Settings


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="NextUp web front end")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the web front end with uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve.add_argument("--port", type=int, default=8000, help="Port to bind")
    serve.add_argument("--api-url", default=None, help="Backend base URL (overrides config and env)")
    serve.add_argument("--config", type=Path, default=None, help="Settings JSON to load before env overrides")

    positions = commands.add_parser("positions", help="List canonical positions and their stat fields")
    positions.add_argument("position", nargs="?", default=None, help="Raw position to normalize")
    return parser.parse_args(argv)


def resolve_settings(config: Optional[Path] = None, api_url: Optional[str] = None) -> Settings:
    """Settings from the JSON profile, then env vars, then the command line."""

    base = Settings.load(config) if config else Settings()
    settings = Settings.from_env(base)
    if api_url:
        settings = Settings.from_mapping({**asdict(settings), "api_base_url": api_url})
    return settings


def describe_position(raw: str) -> list[str]:
    code = normalize_position(raw)
    lines = [f"{raw} -> {code} ({display_name(code)})"]
    fields = stat_fields_for(code)
    if fields:
        lines.append("  stats: " + ", ".join(fields))
    elif raw not in POSITION_ALIASES:
        lines.append("  unrecognized position; no stat fields tracked")
    else:
        lines.append("  no stat fields tracked")
    return lines


def list_positions() -> list[str]:
    lines = []
    for info in iter_positions():
        aliases = f" [{', '.join(info.aliases)}]" if info.aliases else ""
        lines.append(f"{info.code:<4} {display_name(info.code)}{aliases}")
        lines.append("     " + ", ".join(info.stat_fields))
    return lines


def serve(settings: Settings, host: str, port: int) -> None:
    import uvicorn

    from nextup.web import create_app

    logging.basicConfig(level=settings.log_level)
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)

    if args.command == "positions":
        lines = describe_position(args.position) if args.position else list_positions()
        print("\n".join(lines))
        return

    settings = resolve_settings(args.config, args.api_url)
    print(f"Serving {settings.app_title} on http://{args.host}:{args.port} (backend {settings.api_base_url})")
    serve(settings, args.host, args.port)


if __name__ == "__main__":
    main()
