"""Subcommand handlers.

Every handler has the same shape: ``(context, arguments) -> HandlerResult``.
Handlers raise ``CLIError`` subclasses for failures; external tool failures
carry the tool's own exit code.
"""
from __future__ import annotations

import getpass
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .commands import Airport, CommandResult, CommandRunner, NetworkSetup
from .config import WifiConfig
from .errors import ExitCode, QualityUnavailableError, ToolError, UsageError, exit_status
from .meta import PURPOSE, VERSION
from .parsing import WifiInfo, filter_lines, parse_info
from .quality import compute_quality, format_quality

LOG = logging.getLogger(__name__)

LONG_FLAGS = ("-l", "--long")


class Subcommand(str, Enum):
    INFO = "info"
    JOIN = "join"
    OFF = "off"
    ON = "on"
    QUALITY = "quality"
    SCAN = "scan"
    SSID = "ssid"
    TOOL = "tool"
    HELP = "help"
    VERSION = "version"

    @classmethod
    def from_token(cls, token: str) -> Optional["Subcommand"]:
        # "version" is only reachable through --version
        if token == cls.VERSION.value:
            return None
        try:
            return cls(token)
        except ValueError:
            return None


@dataclass
class HandlerResult:
    output: str = ""
    code: int = ExitCode.SUCCESS
    stderr: str = ""

    def ok(self) -> bool:
        return self.code == ExitCode.SUCCESS


@dataclass
class WifiContext:
    config: WifiConfig
    runner: CommandRunner
    prompt: Callable[[str], str] = getpass.getpass
    prog: str = "wifi"
    airport: Airport = field(init=False)
    networksetup: NetworkSetup = field(init=False)

    def __post_init__(self) -> None:
        self.airport = Airport(self.config.airport, self.runner, self.config.timeout)
        self.networksetup = NetworkSetup(self.config.networksetup, self.runner, self.config.timeout)

    @property
    def interface(self) -> str:
        if not self.config.interface:
            raise UsageError("no Wi-Fi interface configured", hint="Pass --interface or set WIFI_INTERFACE")
        return self.config.interface


Handler = Callable[[WifiContext, Sequence[str]], HandlerResult]


def _with_newline(text: str) -> str:
    return text if not text or text.endswith("\n") else text + "\n"


def _require_ok(tool: str, res: CommandResult) -> CommandResult:
    if not res.ok():
        raise ToolError(tool, res.returncode, (res.stderr or res.stdout).strip())
    return res


def _read_info(ctx: WifiContext) -> WifiInfo:
    return parse_info(_require_ok("airport", ctx.airport.get_info()).stdout)


def _quality_of(info: WifiInfo) -> int:
    if not info.connected:
        raise QualityUnavailableError("not connected to a Wi-Fi network")
    return compute_quality(info.signal, info.noise)


def status_line(info: WifiInfo) -> str:
    if not info.powered:
        return "AirPort: Off"
    if not info.connected:
        return "AirPort: On, Disconnected"
    try:
        quality = format_quality(_quality_of(info))
    except QualityUnavailableError as exc:
        LOG.debug("quality omitted: %s", exc)
        return f"AirPort: On, Connected: {info.ssid}"
    return f"AirPort: On, Connected: {info.ssid} ({quality})"


def handle_info(ctx: WifiContext, args: Sequence[str]) -> HandlerResult:
    if not any(a in LONG_FLAGS for a in args):
        return HandlerResult(output=status_line(_read_info(ctx)) + "\n")

    # Long form: raw dump, then a second query for the quality line.
    dump = ctx.airport.get_info()
    lines = [_with_newline(dump.stdout)]
    second = ctx.airport.get_info()
    info = parse_info(second.stdout)
    if info.connected:
        try:
            lines.append(f"Quality: {format_quality(_quality_of(info))}\n")
        except QualityUnavailableError as exc:
            LOG.debug("quality omitted: %s", exc)
    return HandlerResult(output="".join(lines), code=exit_status(second.returncode), stderr=second.stderr)


def handle_ssid(ctx: WifiContext, args: Sequence[str]) -> HandlerResult:
    return HandlerResult(output=_read_info(ctx).ssid + "\n")


def handle_quality(ctx: WifiContext, args: Sequence[str]) -> HandlerResult:
    return HandlerResult(output=format_quality(_quality_of(_read_info(ctx))) + "\n")


def handle_scan(ctx: WifiContext, args: Sequence[str]) -> HandlerResult:
    query = " ".join(args) if args else None
    res = _require_ok("airport", ctx.airport.scan())
    if not query:
        return HandlerResult(output=_with_newline(res.stdout))
    matches = filter_lines(res.stdout, query)
    if not matches:
        LOG.debug("no scan results matching %r", query)
        return HandlerResult(code=ExitCode.ERROR)
    return HandlerResult(output="\n".join(matches) + "\n")


def handle_join(ctx: WifiContext, args: Sequence[str]) -> HandlerResult:
    if not args:
        raise UsageError("join requires a network name", hint=f"Usage: {ctx.prog} join <SSID>")
    ssid = args[0]
    password = args[1] if len(args) > 1 else ctx.prompt(f"Password for {ssid}: ")
    LOG.debug("joining %r on %s", ssid, ctx.interface)
    res = _require_ok("networksetup", ctx.networksetup.join(ctx.interface, ssid, password))
    return HandlerResult(output=_with_newline(res.stdout) or f"Joining {ssid}\n")


def _set_power(ctx: WifiContext, on: bool) -> HandlerResult:
    _require_ok("networksetup", ctx.networksetup.set_power(ctx.interface, on))
    return HandlerResult(output=f"AirPort: {'On' if on else 'Off'}\n")


def handle_on(ctx: WifiContext, args: Sequence[str]) -> HandlerResult:
    return _set_power(ctx, True)


def handle_off(ctx: WifiContext, args: Sequence[str]) -> HandlerResult:
    return _set_power(ctx, False)


def handle_tool(ctx: WifiContext, args: Sequence[str]) -> HandlerResult:
    res = ctx.airport.passthrough(args)
    return HandlerResult(output=res.stdout, code=exit_status(res.returncode), stderr=res.stderr)


# (arguments, description) per subcommand, in help order
USAGE: List[Tuple[Subcommand, str, str]] = [
    (Subcommand.INFO, "[-l|--long]", "Show power and connection status (default)"),
    (Subcommand.JOIN, "<SSID>", "Join a network; prompts for the password"),
    (Subcommand.OFF, "", "Turn the Wi-Fi radio off"),
    (Subcommand.ON, "", "Turn the Wi-Fi radio on"),
    (Subcommand.QUALITY, "", "Show signal quality as a percentage"),
    (Subcommand.SCAN, "[<query>]", "List nearby networks, optionally filtered"),
    (Subcommand.SSID, "", "Show the current network name"),
    (Subcommand.TOOL, "[<args...>]", "Run the airport tool with raw arguments"),
]


def render_help(prog: str) -> str:
    width = max(len(f"{sub.value} {argspec}".strip()) for sub, argspec, _ in USAGE)
    lines = [f"{prog} - {PURPOSE}", "", "Usage:"]
    for sub, argspec, desc in USAGE:
        left = f"{sub.value} {argspec}".strip()
        lines.append(f"  {prog} {left:<{width}}  {desc}")
    lines.extend(
        [
            f"  {prog} -h | --help | help",
            f"  {prog} --version",
            "",
            "Global options (before the subcommand):",
            "  -v, --verbose          Log external commands to stderr",
            "  -c, --config PATH      YAML config file (default ~/.config/wifi/config.yaml)",
            "  -i, --interface NAME   Wireless interface (default: detected, e.g. en0)",
            "",
            "Unrecognized subcommands are passed to 'info'.",
        ]
    )
    return "\n".join(lines) + "\n"


def handle_help(ctx: WifiContext, args: Sequence[str]) -> HandlerResult:
    return HandlerResult(output=render_help(ctx.prog))


def handle_version(ctx: WifiContext, args: Sequence[str]) -> HandlerResult:
    return HandlerResult(output=f"{VERSION}\n")


HANDLERS: Dict[Subcommand, Handler] = {
    Subcommand.INFO: handle_info,
    Subcommand.JOIN: handle_join,
    Subcommand.OFF: handle_off,
    Subcommand.ON: handle_on,
    Subcommand.QUALITY: handle_quality,
    Subcommand.SCAN: handle_scan,
    Subcommand.SSID: handle_ssid,
    Subcommand.TOOL: handle_tool,
    Subcommand.HELP: handle_help,
    Subcommand.VERSION: handle_version,
}

# Subcommands that never touch networksetup and so skip interface lookup
NO_INTERFACE = frozenset({Subcommand.HELP, Subcommand.VERSION, Subcommand.TOOL})
