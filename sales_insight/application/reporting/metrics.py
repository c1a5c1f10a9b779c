"""Shared numeric/formatting utilities for reporting."""

from __future__ import annotations

from dataclasses import dataclass


def safe_share(part: float, whole: float) -> float:
    """Percent of `part` in `whole`; 0 when the denominator is not positive."""
    if whole <= 0:
        return 0.0
    return part / whole * 100


def growth_pct(prev: float, curr: float) -> float:
    """Period-over-period change in percent.

    A zero baseline reads as +100% when the current value is positive and 0%
    otherwise, so the result is always finite.
    """
    if prev == 0:
        return 100.0 if curr > 0 else 0.0
    return (curr - prev) / prev * 100


@dataclass(frozen=True)
class Growth:
    prev: float
    curr: float

    @property
    def delta(self) -> float:
        return self.curr - self.prev

    @property
    def percent(self) -> float:
        return growth_pct(self.prev, self.curr)

    def to_dict(self) -> dict[str, float]:
        return {"prev": self.prev, "curr": self.curr, "delta": self.delta, "percent": self.percent}


def fmt_won(value: float | None) -> str:
    if value is None:
        return "₩0"
    sign = "-" if value < 0 else ""
    return f"{sign}₩{abs(value):,.0f}"


def fmt_won_signed(value: float | None) -> str:
    if value is None:
        return "₩0"
    sign = "+" if value > 0 else "-" if value < 0 else ""
    return f"{sign}₩{abs(value):,.0f}"


def fmt_number(value: float | None) -> str:
    if value is None:
        return "0"
    return f"{value:,.0f}"


def fmt_number_signed(value: float | None) -> str:
    if value is None:
        return "0"
    return f"{value:+,.0f}" if value != 0 else "0"


def fmt_pct(value: float | None, signed: bool = True) -> str:
    if value is None:
        return "N/A"
    if signed:
        return f"{value:+.1f}%" if value != 0 else "0.0%"
    return f"{value:.1f}%"


def trend(value: float | None, eps: float = 1e-9) -> str:
    if value is None:
        return "unknown"
    if value > eps:
        return "up"
    if value < -eps:
        return "down"
    return "flat"
