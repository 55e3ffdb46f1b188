"""Shared test fixtures and utilities.

Canned airport/networksetup output plus a fake command runner so the CLI
can be exercised without touching the real tools.
"""

from __future__ import annotations

import io
import subprocess
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from wifi.commands import AIRPORT_PATH, NETWORKSETUP_PATH, CommandResult, CommandRunner
from wifi.config import WifiConfig
from wifi.handlers import WifiContext

REPO_ROOT = Path(__file__).resolve().parents[1]


# -----------------------------------------------------------------------------
# Path helpers
# -----------------------------------------------------------------------------


def bin_path(name: str) -> Path:
    return REPO_ROOT / "bin" / name


def run(cmd: Sequence[str], cwd: Optional[str] = None, env: Optional[Dict[str, str]] = None):
    return subprocess.run(cmd, cwd=cwd or str(REPO_ROOT), env=env, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)  # noqa: S603


# -----------------------------------------------------------------------------
# Output capture helpers
# -----------------------------------------------------------------------------


@contextmanager
def capture_output():
    """Capture stdout and stderr; yields (out, err) buffers."""
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        yield out, err


# -----------------------------------------------------------------------------
# Canned tool output
# -----------------------------------------------------------------------------

GETINFO_CONNECTED = """\
     agrCtlRSSI: -50
     agrExtRSSI: 0
    agrCtlNoise: -90
    agrExtNoise: 0
          state: running
        op mode: station
     lastTxRate: 300
        maxRate: 450
lastAssocStatus: 0
    802.11 auth: open
      link auth: wpa2-psk
          BSSID: aa:bb:cc:dd:ee:ff
           SSID: HomeNet
            MCS: 15
        channel: 36,80
"""

GETINFO_DISCONNECTED = """\
     agrCtlRSSI: 0
     agrExtRSSI: 0
    agrCtlNoise: 0
    agrExtNoise: 0
          state: init
        op mode:
     lastTxRate: 0
        maxRate: 0
lastAssocStatus: 0
    802.11 auth: open
      link auth: none
          BSSID: 0:0:0:0:0:0
            MCS: 0
        channel: 1
"""

GETINFO_OFF = "AirPort: Off\n"

HARDWARE_PORTS = """\

Hardware Port: Ethernet
Device: en1
Ethernet Address: 11:22:33:44:55:66

Hardware Port: Wi-Fi
Device: en0
Ethernet Address: aa:bb:cc:dd:ee:ff

VLAN Configurations
===================
"""

SCAN_OUTPUT = """\
                            SSID BSSID             RSSI CHANNEL HT CC SECURITY (auth/unicast/group)
                         HomeNet aa:bb:cc:dd:ee:01 -50  36      Y  US WPA2(PSK/AES/AES)
                      CoffeeShop aa:bb:cc:dd:ee:02 -72  6       Y  US NONE
                      HomeNet-5G aa:bb:cc:dd:ee:03 -60  149     Y  US WPA2(PSK/AES/AES)
"""


def airport_cmd(*args: str) -> Tuple[str, ...]:
    return (AIRPORT_PATH, *args)


def networksetup_cmd(*args: str) -> Tuple[str, ...]:
    return (NETWORKSETUP_PATH, *args)


# -----------------------------------------------------------------------------
# Command runner fake
# -----------------------------------------------------------------------------


class FakeRunner(CommandRunner):
    """Returns canned results keyed by the exact argv; records every call.

    Unknown commands answer like a missing binary (return code 127).
    """

    def __init__(self):
        self._results: Dict[Tuple[str, ...], List[CommandResult]] = {}
        self.calls: List[Tuple[str, ...]] = []

    def add(self, cmd, stdout="", stderr="", returncode=0):
        self._results.setdefault(tuple(cmd), []).append(
            CommandResult(stdout=stdout, stderr=stderr, returncode=returncode)
        )
        return self

    def run(self, cmd, timeout=None):
        key = tuple(cmd)
        self.calls.append(key)
        queued = self._results.get(key)
        if not queued:
            return CommandResult(stdout="", stderr=f"{cmd[0]}: not found", returncode=127)
        # Repeat the last canned result once the queue is drained
        return queued.pop(0) if len(queued) > 1 else queued[0]


def make_runner(getinfo: Optional[str] = GETINFO_CONNECTED, ports: Optional[str] = HARDWARE_PORTS) -> FakeRunner:
    runner = FakeRunner()
    if getinfo is not None:
        runner.add(airport_cmd("--getinfo"), stdout=getinfo)
    if ports is not None:
        runner.add(networksetup_cmd("-listallhardwareports"), stdout=ports)
    return runner


def make_context(runner: CommandRunner, interface: str = "en0", prompt=None) -> WifiContext:
    ctx = WifiContext(config=WifiConfig(interface=interface), runner=runner)
    if prompt is not None:
        ctx.prompt = prompt
    return ctx
