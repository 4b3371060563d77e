"""
Helper functions for sizes, ratios and durations shown next to decoded media.
"""

from __future__ import annotations

import math

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def estimate_base64_size(base64_string: str) -> int:
    """根据 base64 长度估算原始字节数（会先去掉 data URL 头部）。"""
    payload = base64_string.split(",", 1)[1] if "," in base64_string else base64_string
    padding = payload.count("=")
    return len(payload) * 3 // 4 - padding


def _trim_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value}"


def format_bytes(bytes_size: float, decimals: int = 2) -> str:
    """Formats bytes into a readable string (e.g. '1.5 KB')."""
    if bytes_size <= 0:
        return "0 B"
    k = 1024
    dm = max(decimals, 0)
    i = min(int(math.floor(math.log(bytes_size) / math.log(k))), len(_SIZE_UNITS) - 1)
    i = max(i, 0)
    value = round(bytes_size / math.pow(k, i), dm)
    return f"{_trim_number(value)} {_SIZE_UNITS[i]}"


def aspect_ratio(width: float, height: float) -> str:
    """按最大公约数约分宽高，例如 1920x1080 => `16:9`。"""
    if height == 0:
        return "NaN"
    divisor = math.gcd(round(width), round(height))
    if divisor == 0:
        return "NaN"
    return f"{_trim_number(width / divisor)}:{_trim_number(height / divisor)}"


def format_duration(seconds: float | None) -> str:
    """Formats seconds into MM:SS, returning "00:00" for empty, NaN or infinite input."""
    if not seconds or math.isnan(seconds) or math.isinf(seconds):
        return "00:00"
    minutes = math.floor(seconds / 60)
    secs = math.floor(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"
