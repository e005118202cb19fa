"""Command-line interface for steam game lookup."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .clients.steam_client import SteamClient
from .config import load_config_overrides
from .errors import NotFound, UpstreamError
from .pipelines.export_pipeline import run_export
from .pipelines.profile_pipeline import resolve_profile
from .pipelines.search_pipeline import search


def setup_logging(log_file: Path | None = None, *, level: int = logging.INFO) -> None:
    """Configure logging to the console and, optionally, a file."""
    formatter = logging.Formatter(
        "%(asctime)s.%(msecs)03d - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    # Console handler (stderr, so JSON printed by `search`/`game` stays clean on stdout)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logging.info(f"Logging to file: {log_file}")

    # Silence verbose HTTP debug logs by default
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def _settings(args: argparse.Namespace) -> dict[str, Any]:
    return load_config_overrides(args.config)


def _client(settings: dict[str, Any]) -> SteamClient:
    return SteamClient(steam=settings["steam"], request=settings["request"])


def _print_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")


def _command_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from .web.app import create_app

    settings = _settings(args)
    server = settings["server"]
    host = args.host or server.host
    port = args.port or server.port
    app = create_app(str(args.config) if args.config else None)
    logging.info(f"Serving on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="debug" if args.debug else "info")
    return 0


def _command_search(args: argparse.Namespace) -> int:
    settings = _settings(args)
    with _client(settings) as client:
        results = search(
            args.query, client.search_store, cfg=settings["search"], profile=settings["profile"]
        )
        logging.info(f"[STEAM] {client.format_stats()}")
    _print_json({"results": [r.to_dict() for r in results]})
    return 0


def _command_game(args: argparse.Namespace) -> int:
    settings = _settings(args)
    with _client(settings) as client:
        try:
            profile = resolve_profile(
                args.appid,
                client.sources(),
                heuristics=settings["heuristics"],
                profile=settings["profile"],
            )
        except NotFound:
            _print_json({"error": "Game not found"})
            return 2
        except UpstreamError as e:
            logging.error(str(e))
            _print_json({"error": "Failed to fetch game data"})
            return 1
        finally:
            logging.info(f"[STEAM] {client.format_stats()}")
    _print_json(profile.to_dict())
    return 0


def _command_export(args: argparse.Namespace) -> int:
    settings = _settings(args)
    out = args.out or args.input.with_name(f"{args.input.stem}_Steam.csv")
    with _client(settings) as client:
        failed = run_export(args.input, out, client.sources(), settings=settings)
        logging.info(f"[STEAM] {client.format_stats()}")
    return 1 if failed and args.strict else 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="steam-game-lookup",
        description="Search Steam's catalog and resolve game profiles",
    )
    p_common = argparse.ArgumentParser(add_help=False)
    p_common.add_argument(
        "--config", type=Path, help="YAML file overriding config sections (default: built-in)"
    )
    p_common.add_argument("--log-file", type=Path, help="Also write logs to this file")
    p_common.add_argument(
        "--debug", action="store_true", help="Enable DEBUG logging (default: INFO)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_serve = sub.add_parser("serve", help="Run the HTTP API", parents=[p_common])
    p_serve.add_argument("--host", type=str, help="Bind address (default: config server.host)")
    p_serve.add_argument("--port", type=int, help="Port (default: config server.port)")
    p_serve.set_defaults(_fn=_command_serve)

    p_search = sub.add_parser("search", help="Search titles and print candidates", parents=[p_common])
    p_search.add_argument("query", type=str, help="Partial title")
    p_search.set_defaults(_fn=_command_search)

    p_game = sub.add_parser("game", help="Resolve one game profile by app id", parents=[p_common])
    p_game.add_argument("appid", type=str, help="Steam app id")
    p_game.set_defaults(_fn=_command_game)

    p_export = sub.add_parser(
        "export",
        help="Resolve profiles for every row of a CSV (Name and/or Steam_AppID columns)",
        parents=[p_common],
    )
    p_export.add_argument("input", type=Path, help="Input CSV")
    p_export.add_argument("--out", type=Path, help="Output CSV (default: <input>_Steam.csv)")
    p_export.add_argument(
        "--strict", action="store_true", help="Exit with status 1 when any row failed to resolve"
    )
    p_export.set_defaults(_fn=_command_export)

    ns = parser.parse_args(argv)
    setup_logging(ns.log_file, level=logging.DEBUG if ns.debug else logging.INFO)
    return ns._fn(ns)


if __name__ == "__main__":
    sys.exit(main())
