"""Roomgrid CLI entry point.

Provides subcommands for running the Socket.IO layout server and for
generating a single layout straight to the terminal. Accepts configuration
via flags and environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    _COLOR_ENABLED = sys.stdout.isatty()
except Exception:  # pragma: no cover - environment dependent
    _COLOR_ENABLED = False


def _load_version() -> str:
    try:
        with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()

EXIT_CONFIG_ERROR = 2


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Roomgrid layout server

    Grow tree-shaped dungeon room layouts on a fixed grid. Run the real-time
    Flask-SocketIO server, or generate one layout and print it. Configuration
    can be provided via CLI flags or environment variables. If both are
    present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                  Bind address for the web server (default: 0.0.0.0)
          PORT                  Port for the web server (default: 5000)
          ROOMGRID_WIDTH        Grid width for new layouts (default: 10)
          ROOMGRID_HEIGHT       Grid height for new layouts (default: 10)
          ROOMGRID_MAX_ROOMS    Room budget (default: 15)
          ROOMGRID_MIN_ROOMS    Advisory minimum (default: 7)
          ROOMGRID_MAX_GRID     Largest allowed width/height (default: 50)
          ROOMGRID_MAX_ROOMS_LIMIT  Largest allowed max/min rooms (default: 100)
          ROOMGRID_LOG_LEVEL    debug | info | warn | error (default: info; warn for generate)
          ROOMGRID_LOG_JSON     1 to emit JSON log lines

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print a layout for a fixed RNG seed
          python run.py generate --rng-seed 42

          # Bigger grid, JSON output, retry up to 5 times to reach 10 rooms
          python run.py generate --width 20 --height 20 --max-rooms 40 --min-rooms 10 --retries 5 --json
        """
    )

    parser = argparse.ArgumentParser(
        prog="Roomgrid",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Roomgrid {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the Socket.IO web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the real-time Flask/Socket.IO layout server",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one layout and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run a layout to completion and print it as ASCII (default) or JSON",
    )
    gen_parser.add_argument("--width", type=int, default=None, help="Grid width")
    gen_parser.add_argument("--height", type=int, default=None, help="Grid height")
    gen_parser.add_argument("--seed-x", dest="seed_x", type=int, default=None, help="Seed room x (default: centre)")
    gen_parser.add_argument("--seed-y", dest="seed_y", type=int, default=None, help="Seed room y (default: centre)")
    gen_parser.add_argument("--max-rooms", dest="max_rooms", type=int, default=None, help="Room budget")
    gen_parser.add_argument("--min-rooms", dest="min_rooms", type=int, default=None, help="Advisory minimum")
    gen_parser.add_argument(
        "--skip-chance", dest="skip_chance", type=float, default=None, help="Probability a candidate is skipped"
    )
    gen_parser.add_argument(
        "--rng-seed", dest="rng_seed", default=None, help="RNG seed (int, or any string to hash)"
    )
    gen_parser.add_argument(
        "--retries",
        dest="min_rooms_retries",
        type=int,
        default=None,
        help="Regenerate up to N times while the layout is short of --min-rooms",
    )
    gen_parser.add_argument("--json", dest="as_json", action="store_true", help="Print a JSON snapshot")
    gen_parser.set_defaults(command="generate")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


def run_generate(args: argparse.Namespace) -> int:
    from roomgrid.layout import ConfigurationError, LayoutConfig, RegenerationController
    from roomgrid.layout.render import layout_snapshot, render_ascii
    from roomgrid.layout.seeds import coerce_seed

    options = {
        name: getattr(args, name)
        for name in ("width", "height", "seed_x", "seed_y", "max_rooms", "min_rooms", "skip_chance", "min_rooms_retries")
    }
    if args.rng_seed is not None:
        options["rng_seed"] = coerce_seed(args.rng_seed)
    try:
        config = LayoutConfig.from_env(**options).validate()
        controller = RegenerationController(config)
        controller.start()
    except ConfigurationError as e:
        print(f"[ERROR] {e.message}" + (f" (field: {e.field})" if e.field else ""), file=sys.stderr)
        return EXIT_CONFIG_ERROR
    controller.run()
    if args.as_json:
        print(json.dumps(layout_snapshot(controller), indent=2))
        return 0
    state = controller.state
    header = f"rng_seed={controller.rng_seed} rooms={state.room_count}/{state.max_rooms} ticks={state.ticks}"
    print(f"{Fore.CYAN}{header}{Style.RESET_ALL}" if _COLOR_ENABLED else header)
    print(render_ascii(controller))
    return 0


def main(argv: list[str]) -> int:
    # Load .env if requested, else the default .env if present (no error if missing)
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()

    if mode == "generate":
        # the map (or JSON) is the output; keep info-level log lines out of it
        os.environ.setdefault("ROOMGRID_LOG_LEVEL", "warn")
        return run_generate(args)

    # Resolve configuration from CLI flags or env vars
    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))

    host = getattr(args, "host", None) or env_host
    cli_port = getattr(args, "port", None)
    port = int(cli_port if cli_port is not None else env_port)
    debug = bool(getattr(args, "debug", False))

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from roomgrid.server import start_server

    title = (
        f"{Fore.CYAN}{Style.BRIGHT}Roomgrid Server Bootup{Style.RESET_ALL}" if _COLOR_ENABLED else "Roomgrid Server Bootup"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('WebSockets:'):12} {value('enabled')}",
        f"  {label('Debug:'):12} {value('YES' if debug else 'NO')}",
        divider,
        "",
    ]
    print("\n".join(lines))

    from roomgrid.logging_utils import log

    log.info(event="startup", mode=mode, host=host, port=port)

    start_server(host=host, port=port, debug=debug)
    return 0


def cli():  # pragma: no cover - console script shim
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
