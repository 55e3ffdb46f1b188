from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

LOG = logging.getLogger(__name__)

AIRPORT_PATH = "/System/Library/PrivateFrameworks/Apple80211.framework/Versions/Current/Resources/airport"
NETWORKSETUP_PATH = "/usr/sbin/networksetup"


@dataclass
class CommandResult:
    stdout: str
    stderr: str
    returncode: int

    def ok(self) -> bool:
        return self.returncode == 0


def _loggable(cmd: Sequence[str]) -> str:
    """Render a command for logs with the join password masked."""
    parts = list(cmd)
    if "-setairportnetwork" in parts:
        idx = parts.index("-setairportnetwork")
        # flag, interface, ssid, then the password
        parts = parts[: idx + 3] + ["****" for _ in parts[idx + 3:]]
    return " ".join(parts)


class CommandRunner:
    """Simple abstraction to allow faking subprocess calls in tests."""

    def run(self, cmd: Sequence[str], timeout: Optional[float] = None) -> CommandResult:  # pragma: no cover - interface
        raise NotImplementedError


class SubprocessRunner(CommandRunner):
    def run(self, cmd: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
        LOG.debug("exec: %s", _loggable(cmd))
        try:
            proc = subprocess.run(  # noqa: S603 - cmd is controlled by caller
                list(cmd),
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            stdout = exc.stdout.decode(errors="ignore") if isinstance(exc.stdout, bytes) else (exc.stdout or "")
            stderr = exc.stderr.decode(errors="ignore") if isinstance(exc.stderr, bytes) else (exc.stderr or "")
            LOG.warning("%s timed out after %ss", cmd[0], timeout)
            return CommandResult(stdout=stdout, stderr=stderr or "timeout", returncode=124)
        except FileNotFoundError:
            return CommandResult(stdout="", stderr=f"{cmd[0]}: not found", returncode=127)
        except PermissionError:
            return CommandResult(stdout="", stderr=f"{cmd[0]}: permission denied", returncode=126)
        LOG.debug("exit %d from %s", proc.returncode, cmd[0])
        if proc.stdout:
            LOG.debug("stdout: %s", proc.stdout[:500])
        if proc.stderr:
            LOG.debug("stderr: %s", proc.stderr[:500])
        return CommandResult(stdout=proc.stdout, stderr=proc.stderr, returncode=proc.returncode)


class _Tool:
    def __init__(self, path: str, runner: CommandRunner, timeout: Optional[float] = None) -> None:
        self.path = path
        self._runner = runner
        self._timeout = timeout

    def _run(self, *args: str) -> CommandResult:
        return self._runner.run([self.path, *args], timeout=self._timeout)


class NetworkSetup(_Tool):
    """networksetup: radio power, joining networks, hardware port listing."""

    def set_power(self, interface: str, on: bool) -> CommandResult:
        return self._run("-setairportpower", interface, "on" if on else "off")

    def join(self, interface: str, ssid: str, password: Optional[str] = None) -> CommandResult:
        args: List[str] = ["-setairportnetwork", interface, ssid]
        if password:
            args.append(password)
        return self._run(*args)

    def list_hardware_ports(self) -> CommandResult:
        return self._run("-listallhardwareports")


class Airport(_Tool):
    """airport: link diagnostics, scans and raw passthrough."""

    def get_info(self) -> CommandResult:
        return self._run("--getinfo")

    def scan(self) -> CommandResult:
        return self._run("--scan")

    def passthrough(self, args: Sequence[str]) -> CommandResult:
        return self._run(*args)
