"""Command-line entry point for the wifi tool."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional

from .commands import CommandRunner, SubprocessRunner
from .config import WifiConfig, build_config, resolve_interface
from .errors import CLIError, handle_error
from .handlers import NO_INTERFACE, Subcommand, WifiContext
from .meta import APP_ID, PURPOSE
from .pipeline import WifiRequest, run_request

LOG = logging.getLogger("wifi")


def build_parser() -> argparse.ArgumentParser:
    """Parser for the global options that precede the subcommand.

    Help and version are resolved by the dispatcher, so argparse's own
    handling of them is disabled.
    """
    parser = argparse.ArgumentParser(
        prog=APP_ID,
        description=PURPOSE,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log external commands to stderr")
    parser.add_argument("-c", "--config", help="YAML config file")
    parser.add_argument("-i", "--interface", help="Wireless interface (default: detected)")
    parser.add_argument("rest", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
    return parser


_HANDLER: Optional[logging.Handler] = None


def configure_logging(verbose: bool) -> None:
    """Route the ``wifi`` loggers to stderr; DEBUG with --verbose."""
    global _HANDLER
    LOG.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if _HANDLER is None:
        _HANDLER = logging.StreamHandler(sys.stderr)
        _HANDLER.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        LOG.addHandler(_HANDLER)


def split_argv(argv: Optional[List[str]] = None) -> tuple[argparse.Namespace, List[str]]:
    """Separate global options from the subcommand and its arguments."""
    parser = build_parser()
    args, extras = parser.parse_known_args(argv)
    return args, [*extras, *args.rest]


def main(
    argv: Optional[List[str]] = None,
    *,
    runner: Optional[CommandRunner] = None,
    prompt: Optional[Callable[[str], str]] = None,
) -> int:
    """Main entry point for the Wi-Fi CLI."""
    args, rest = split_argv(argv)
    configure_logging(args.verbose)
    request = WifiRequest.from_argv(rest)
    runner = runner or SubprocessRunner()

    try:
        if request.subcommand in (Subcommand.HELP, Subcommand.VERSION):
            # Static output; never depends on the config file
            config = WifiConfig(verbose=args.verbose)
        else:
            config = build_config(config_path=args.config, interface=args.interface, verbose=args.verbose)
        if request.subcommand not in NO_INTERFACE:
            config = resolve_interface(config, runner)
        context = WifiContext(config=config, runner=runner, prog=APP_ID)
        if prompt is not None:
            context.prompt = prompt
        return run_request(request, context)
    except CLIError as e:
        return handle_error(e, verbose=args.verbose)
    except KeyboardInterrupt as e:
        return handle_error(e, verbose=args.verbose)
    except Exception as e:
        return handle_error(e, verbose=args.verbose)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
