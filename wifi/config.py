"""Runtime configuration, built once per invocation.

Precedence (lowest to highest): defaults, YAML config file, environment,
command-line flags. The wireless interface is resolved from the hardware
port listing when nothing above names it.
"""
from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .commands import AIRPORT_PATH, NETWORKSETUP_PATH, CommandRunner, NetworkSetup
from .errors import ConfigError
from .parsing import find_wireless_device

LOG = logging.getLogger(__name__)

DEFAULT_INTERFACE = "en0"
CONFIG_KEYS = ("interface", "airport", "networksetup", "timeout")
ENV_OVERRIDES = {
    "WIFI_INTERFACE": "interface",
    "WIFI_AIRPORT": "airport",
    "WIFI_NETWORKSETUP": "networksetup",
}


@dataclass(frozen=True)
class WifiConfig:
    interface: Optional[str] = None
    airport: str = AIRPORT_PATH
    networksetup: str = NETWORKSETUP_PATH
    timeout: Optional[float] = None
    verbose: bool = False


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    explicit = env.get("WIFI_CONFIG")
    if explicit:
        return Path(explicit).expanduser()
    xdg = env.get("XDG_CONFIG_HOME")
    root = Path(xdg).expanduser() if xdg else Path("~/.config").expanduser()
    return root / "wifi" / "config.yaml"


def load_config_file(path: Optional[Path]) -> Dict[str, Any]:
    """Load a YAML mapping; returns {} if missing/empty."""
    if path is None or not path.exists():
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc.strerror or exc}") from exc
    if not text.strip():
        return {}
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        raise ConfigError(
            f"{path}: unknown key(s): {', '.join(map(str, unknown))}",
            hint=f"Supported keys: {', '.join(CONFIG_KEYS)}",
        )
    LOG.debug("loaded config from %s", path)
    return data


def _coerce_timeout(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"timeout must be a number of seconds, got {value!r}") from None
    return timeout if timeout > 0 else None


def build_config(
    *,
    config_path: Optional[str] = None,
    interface: Optional[str] = None,
    verbose: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> WifiConfig:
    env = os.environ if environ is None else environ
    if config_path:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise ConfigError(f"config file not found: {path}")
    else:
        path = default_config_path(env)

    values: Dict[str, Any] = dict(load_config_file(path))
    for var, key in ENV_OVERRIDES.items():
        if env.get(var):
            values[key] = env[var]
    if interface:
        values["interface"] = interface

    return WifiConfig(
        interface=str(values["interface"]) if values.get("interface") else None,
        airport=str(values.get("airport") or AIRPORT_PATH),
        networksetup=str(values.get("networksetup") or NETWORKSETUP_PATH),
        timeout=_coerce_timeout(values.get("timeout")),
        verbose=verbose,
    )


def resolve_interface(config: WifiConfig, runner: CommandRunner) -> WifiConfig:
    """Return ``config`` with ``interface`` filled in from hardware ports."""
    if config.interface:
        return config
    res = NetworkSetup(config.networksetup, runner, config.timeout).list_hardware_ports()
    device = find_wireless_device(res.stdout) if res.ok() else None
    if device is None:
        LOG.warning("no Wi-Fi hardware port found; falling back to %s", DEFAULT_INTERFACE)
        device = DEFAULT_INTERFACE
    else:
        LOG.debug("resolved Wi-Fi interface: %s", device)
    return dataclasses.replace(config, interface=device)
