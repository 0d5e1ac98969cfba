import math
import re

# Plain decimal or exponent notation; rejects float() extras like "1_000", "nan" or "infinity".
NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_maybe_number(raw) -> float | None:
    """Best-effort cell parsing: blank, non-numeric or non-finite values become None."""
    if raw is None:
        return None
    trimmed = str(raw).strip()
    if not NUMBER_RE.fullmatch(trimmed):
        return None
    num = float(trimmed)
    return num if math.isfinite(num) else None


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def format_percent(value) -> str:
    if _is_missing(value):
        return "No data"
    return f"{value:.2f}%"


def format_number_short(value) -> str:
    """
    Compact number label for tooltips.

    Examples:
      - 1234567  -> '1.23M'
      - 42.25    -> '42.2'
      - 0.456    -> '0.46'
    """
    if _is_missing(value):
        return "No data"

    abs_value = abs(value)
    if abs_value >= 1e9:
        return f"{value / 1e9:.2f}B"
    if abs_value >= 1e6:
        return f"{value / 1e6:.2f}M"
    if abs_value >= 1e3:
        return f"{value / 1e3:.2f}K"
    if abs_value >= 10:
        return f"{value:.1f}"
    return f"{value:.2f}"


def format_signed_number_short(value) -> str:
    if _is_missing(value):
        return "No data"
    sign = "+" if value > 0 else ""
    return f"{sign}{format_number_short(value)}"
