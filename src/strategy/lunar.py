"""
Lunar-cycle trade signal.

New moon: sell part of the primary reserve asset into the secondary asset.
Full moon: buy the primary asset back with part of the secondary asset.
Any other day: do nothing.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone

from src.domain.models import AssetPair, Direction, TradeIntent

SYNODIC_MONTH_DAYS = 29.530588853
# Julian date of the reference new moon (2000-01-06 14:24 UTC).
REFERENCE_NEW_MOON_JD = 2451550.1
_UNIX_EPOCH_JD = 2440587.5

# Low window wraps around the cycle: age < NEW_MOON_END or age > NEW_MOON_START.
NEW_MOON_END = 1.0
NEW_MOON_START = 28.0
# High window: FULL_MOON_START < age < FULL_MOON_END.
FULL_MOON_START = 13.0
FULL_MOON_END = 15.0

# SELL and BUY must never both hold for the same age.
if not (NEW_MOON_END <= FULL_MOON_START and FULL_MOON_END <= NEW_MOON_START):
    raise ValueError("lunar trade windows overlap")


def lunar_age(when: datetime | None = None) -> float:
    """Days since the last new moon, in [0, SYNODIC_MONTH_DAYS)."""
    when = when or datetime.now(tz=timezone.utc)
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    julian_date = when.timestamp() / 86400.0 + _UNIX_EPOCH_JD
    cycles = (julian_date - REFERENCE_NEW_MOON_JD) / SYNODIC_MONTH_DAYS
    return (cycles - math.floor(cycles)) * SYNODIC_MONTH_DAYS


def is_new_moon(age: float) -> bool:
    return age < NEW_MOON_END or age > NEW_MOON_START


def is_full_moon(age: float) -> bool:
    return FULL_MOON_START < age < FULL_MOON_END


def classify_phase(age: float) -> Direction:
    """Map a lunar age to exactly one of SELL, BUY or NONE."""
    if is_new_moon(age):
        return Direction.SELL
    if is_full_moon(age):
        return Direction.BUY
    return Direction.NONE


def trade_assets(direction: Direction, pair: AssetPair) -> tuple[str, str]:
    """(incoming, outgoing) asset ids for a trade direction."""
    if direction == Direction.SELL:
        return pair.secondary, pair.primary
    if direction == Direction.BUY:
        return pair.primary, pair.secondary
    raise ValueError("No assets to trade for Direction.NONE")


def build_trade_intent(direction: Direction, pair: AssetPair, outgoing_balance: int, trade_size_bps: int) -> TradeIntent:
    """Size a trade as a share of the outgoing asset balance (integer maths, rounds down)."""
    if direction == Direction.NONE:
        return TradeIntent(direction=Direction.NONE)

    incoming, outgoing = trade_assets(direction, pair)
    amount = int(outgoing_balance) * int(trade_size_bps) // 10000
    return TradeIntent(
        direction=direction,
        incoming_asset_id=incoming,
        outgoing_asset_id=outgoing,
        outgoing_amount=amount,
    )
