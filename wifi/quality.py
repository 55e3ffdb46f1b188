from __future__ import annotations

from typing import Union

from .errors import QualityUnavailableError

# dBm of signal-over-noise that maps to 100%
FULL_SCALE_SNR = 50


def _to_int(value: Union[int, str, None], label: str) -> int:
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise QualityUnavailableError(
            f"{label} not reported",
            hint="Is Wi-Fi on and connected? Try: wifi info --long",
        ) from None


def compute_quality(signal: Union[int, str, None], noise: Union[int, str, None]) -> int:
    """Signal quality as 100 * (signal - noise) / 50, truncated toward zero.

    The result is not clamped: a very strong link reads above 100 and a
    signal below the noise floor reads negative.
    """
    sig = _to_int(signal, "signal (agrCtlRSSI)")
    floor = _to_int(noise, "noise (agrCtlNoise)")
    scaled = 100 * (sig - floor)
    pct = abs(scaled) // FULL_SCALE_SNR
    return pct if scaled >= 0 else -pct


def format_quality(percent: int) -> str:
    return f"{percent}%"
