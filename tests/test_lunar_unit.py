from datetime import datetime, timedelta, timezone

import pytest

from src.domain.models import AssetPair, Direction
from src.strategy.lunar import (
    SYNODIC_MONTH_DAYS,
    build_trade_intent,
    classify_phase,
    is_full_moon,
    is_new_moon,
    lunar_age,
)

WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
PAIR = AssetPair(primary=WETH, secondary=USDC)

REFERENCE_NEW_MOON = datetime(2000, 1, 6, 14, 24, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "age, expected",
    [
        (0, Direction.SELL),
        (0.5, Direction.SELL),
        (1, Direction.NONE),
        (7.4, Direction.NONE),
        (13, Direction.NONE),
        (13.01, Direction.BUY),
        (14, Direction.BUY),
        (15, Direction.NONE),
        (28, Direction.NONE),
        (28.01, Direction.SELL),
        (29, Direction.SELL),
    ],
)
def test_classify_phase_boundaries(age, expected):
    assert classify_phase(age) == expected


def test_trade_windows_never_overlap_over_the_whole_cycle():
    steps = int(SYNODIC_MONTH_DAYS * 100) + 1
    for i in range(steps):
        age = i / 100
        assert not (is_new_moon(age) and is_full_moon(age)), age
        assert classify_phase(age) in (Direction.SELL, Direction.BUY, Direction.NONE)


def test_lunar_age_is_zero_at_reference_new_moon():
    age = lunar_age(REFERENCE_NEW_MOON)
    assert min(age, SYNODIC_MONTH_DAYS - age) < 1e-4


def test_lunar_age_half_cycle_later_is_full_moon():
    when = REFERENCE_NEW_MOON + timedelta(days=SYNODIC_MONTH_DAYS / 2)
    age = lunar_age(when)
    assert age == pytest.approx(SYNODIC_MONTH_DAYS / 2, abs=1e-4)
    assert classify_phase(age) == Direction.BUY


def test_lunar_age_treats_naive_datetimes_as_utc():
    naive = datetime(2024, 3, 10, 12, 0)
    aware = naive.replace(tzinfo=timezone.utc)
    assert lunar_age(naive) == lunar_age(aware)


def test_lunar_age_stays_in_range_across_many_cycles():
    start = datetime(1990, 1, 1, tzinfo=timezone.utc)
    for day in range(0, 20000, 37):
        age = lunar_age(start + timedelta(days=day, hours=day % 24))
        assert 0 <= age < SYNODIC_MONTH_DAYS


def test_sell_intent_spends_half_of_primary_for_secondary():
    intent = build_trade_intent(Direction.SELL, PAIR, outgoing_balance=3_000_000_000_000_000_001, trade_size_bps=5000)
    assert intent.outgoing_asset_id == WETH
    assert intent.incoming_asset_id == USDC
    assert intent.outgoing_amount == 1_500_000_000_000_000_000


def test_buy_intent_spends_secondary_for_primary():
    intent = build_trade_intent(Direction.BUY, PAIR, outgoing_balance=1000, trade_size_bps=2500)
    assert intent.outgoing_asset_id == USDC
    assert intent.incoming_asset_id == WETH
    assert intent.outgoing_amount == 250


def test_no_trade_intent_carries_no_assets():
    intent = build_trade_intent(Direction.NONE, PAIR, outgoing_balance=1000, trade_size_bps=5000)
    assert not intent.is_trade
    assert intent.outgoing_amount == 0
    assert intent.incoming_asset_id is None
