"""wifi package.

Command-line control of Wi-Fi on macOS: status, signal quality, scans,
joining networks and radio power, by driving networksetup and airport.

Public entrypoint: `python -m wifi` or `bin/wifi`.
"""

__all__ = [
    "cli",
]
