"""Field extraction over airport/networksetup text output.

``airport --getinfo`` prints one ``key: value`` pair per line, e.g.::

         agrCtlRSSI: -52
        agrCtlNoise: -90
              BSSID: aa:bb:cc:dd:ee:ff
               SSID: HomeNet

Missing lines are not errors; the corresponding field is simply absent.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

_SSID_LINE = re.compile(r"(?<!B)SSID")
_SSID_MARKER = "SSID: "
_POWER_OFF = re.compile(r"^\s*AirPort:\s*Off\s*$", re.MULTILINE)
WIRELESS_PORT_NAMES = ("Wi-Fi", "AirPort")


@dataclass
class WifiInfo:
    ssid: str = ""
    signal: Optional[str] = None
    noise: Optional[str] = None
    powered: bool = True

    @property
    def connected(self) -> bool:
        return bool(self.ssid)


@dataclass
class HardwarePort:
    name: str
    device: Optional[str] = None


def _first_line(text: str, predicate) -> Optional[str]:
    for line in text.splitlines():
        if predicate(line):
            return line
    return None


def _last_field(line: Optional[str]) -> Optional[str]:
    if line is None:
        return None
    fields = line.split()
    return fields[-1] if fields else None


def parse_ssid(text: str) -> str:
    """Return the SSID, or '' when not connected.

    The BSSID line also contains 'SSID', so only lines where 'SSID' is not
    directly preceded by 'B' qualify.
    """
    line = _first_line(text, lambda ln: _SSID_LINE.search(ln) is not None)
    if line is None:
        return ""
    idx = line.find(_SSID_MARKER)
    if idx < 0:
        return ""
    return line[idx + len(_SSID_MARKER):].rstrip("\r")


def parse_signal(text: str) -> Optional[str]:
    return _last_field(_first_line(text, lambda ln: "agrCtlRSSI" in ln))


def parse_noise(text: str) -> Optional[str]:
    return _last_field(_first_line(text, lambda ln: "agrCtlNoise" in ln))


def is_powered_off(text: str) -> bool:
    return _POWER_OFF.search(text) is not None


def parse_info(text: str) -> WifiInfo:
    return WifiInfo(
        ssid=parse_ssid(text),
        signal=parse_signal(text),
        noise=parse_noise(text),
        powered=not is_powered_off(text),
    )


def parse_hardware_ports(text: str) -> List[HardwarePort]:
    """Parse ``networksetup -listallhardwareports`` into port entries."""
    ports: List[HardwarePort] = []
    current: Optional[HardwarePort] = None
    for line in text.splitlines():
        if ":" not in line:
            continue
        key, val = line.split(":", 1)
        key, val = key.strip(), val.strip()
        if key == "Hardware Port":
            current = HardwarePort(name=val)
            ports.append(current)
        elif current is not None and key == "Device":
            current.device = val or None
    return ports


def find_wireless_device(text: str) -> Optional[str]:
    """Device name of the first Wi-Fi/AirPort hardware port, if any."""
    for port in parse_hardware_ports(text):
        if any(name in port.name for name in WIRELESS_PORT_NAMES) and port.device:
            return port.device
    return None


def filter_lines(text: str, query: Optional[str]) -> List[str]:
    """Lines of ``text`` containing ``query`` (all lines when no query)."""
    lines = text.splitlines()
    if not query:
        return lines
    return [ln for ln in lines if query in ln]
