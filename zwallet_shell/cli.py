"""Command line entry point for the light wallet shell.

With a command on the command line the command is run once and its report
printed; without one the interactive shell starts.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Sequence

from .commands import do_user_command
from .config import ConfigurationError, load_server_config
from .rpc_client import LightClientRPC

logger = logging.getLogger(__name__)


def _should_debug() -> bool:
    return bool(int(os.environ.get("ZWALLET_DEBUG", "0") or "0"))


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or _should_debug() else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zwallet-shell",
        description="Interactive shell for a shielded light wallet",
    )
    parser.add_argument("--config", dest="config_path", default=None, help="YAML config file")
    parser.add_argument(
        "--endpoint",
        default=None,
        help="Wallet daemon URL, e.g. http://127.0.0.1:9067",
    )
    parser.add_argument("--host", default=None, help="Wallet daemon host")
    parser.add_argument("--port", type=int, default=None, help="Wallet daemon port")
    parser.add_argument("--user", default=None, help="Wallet daemon RPC user")
    parser.add_argument("--password", default=None, help="Wallet daemon RPC password")
    parser.add_argument("--timeout", type=float, default=None, help="RPC timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("command", nargs="?", help="Run a single command and exit")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments for the command")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_server_config(
            config_path=args.config_path,
            overrides={
                "endpoint": args.endpoint,
                "host": args.host,
                "port": args.port,
                "user": args.user,
                "password": args.password,
                "timeout": args.timeout,
            },
        )
    except ConfigurationError as exc:
        parser.exit(1, f"error: {exc}\n")

    core = LightClientRPC(config)
    logger.debug("Using wallet daemon at %s", config.base_url)

    if args.command:
        print(do_user_command(args.command, args.args, core))
        return

    from .console import run_shell

    try:
        run_shell(core)
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        logger.info("Interrupted by user")


if __name__ == "__main__":
    main(sys.argv[1:])
