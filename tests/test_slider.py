import random

import pytest

from listingsearch.search.slider import RangeSlider, domain_for, magnitude_step, round_to_step


def test_log_scale_scenario():
    s = RangeSlider(0, 10_000_000, step=1_000_000, log_scale=True)
    assert s.to_value(50) < 5_000_000
    assert s.to_value(100) == 10_000_000
    assert s.to_value(0) == 0


def test_log_scale_midpoint_below_linear_midpoint():
    s = RangeSlider(0, 100_000_000, step=10_000, log_scale=True)
    assert s.to_value(50) < 50_000_000
    assert s.percent(1_000_000) > 1


@pytest.mark.parametrize('v', [0, 1_000_000, 3_000_000, 7_000_000, 10_000_000])
def test_log_round_trip_on_step_grid(v):
    s = RangeSlider(0, 10_000_000, step=1_000_000, log_scale=True)
    assert s.to_value(s.percent(v)) == v


@pytest.mark.parametrize('v', [0, 12.5, 50, 99.9, 200])
def test_linear_round_trip(v):
    s = RangeSlider(0, 200, step=1)
    assert s.to_value(s.percent(v)) == pytest.approx(v)


def test_percent_bounds():
    s = RangeSlider(0, 200)
    assert s.percent(50) == 25
    log = RangeSlider(0, 1_000, step=10, log_scale=True)
    assert log.percent(0) == 0
    assert log.percent(1_000) == pytest.approx(100)
    assert log.percent(-5) == 0
    assert log.to_value(150) == 1_000


def test_handles_never_cross():
    s = RangeSlider(0, 100, step=5)
    s.set_low(200)
    assert s.value == (95, 100)
    s.set_high(0)
    assert s.value == (95, 100)
    s.set_high(50)
    assert s.low + s.step <= s.high
    s.drag_low(100)
    assert s.low + s.step <= s.high


@pytest.mark.parametrize('lo,hi', [(-50, 500), (60, 40), (100, 100), (0, 0), (30, 31)])
def test_normalize_is_idempotent_and_legal(lo, hi):
    s = RangeSlider(0, 100, step=5, value=(lo, hi))
    first = s.value
    assert 0 <= s.low and s.high <= 100
    assert s.low + s.step <= s.high
    s.sync(first)
    assert s.value == first


def test_on_change_fires_on_every_move():
    seen = []
    s = RangeSlider(0, 100, on_change=seen.append)
    s.set_low(10)
    s.drag_high(50)
    assert seen == [(10, 100), (10, 50)]


def test_manual_entry():
    seen = []
    s = RangeSlider(0, 10_000, step=10, on_change=seen.append)
    assert s.commit_low_text('1,000') is True
    assert s.low == 1_000
    assert s.commit_high_text('abc') is False
    assert s.commit_low_text('') is False
    assert s.high == 10_000
    assert seen == [(1_000, 10_000)]
    assert s.commit_high_text('500') is True
    assert s.high == 1_010


def test_sync_does_not_notify():
    seen = []
    s = RangeSlider(0, 100, on_change=seen.append)
    s.sync((20, 30))
    assert s.value == (20, 30)
    assert seen == []


def test_invalid_construction():
    with pytest.raises(ValueError):
        RangeSlider(10, 10)
    with pytest.raises(ValueError):
        RangeSlider(0, 10, step=0)


def test_step_wider_than_domain_is_capped():
    s = RangeSlider(0, 10, step=50)
    assert s.step == 10
    assert s.value == (0, 10)


def test_track():
    s = RangeSlider(0, 100, value=(20, 60))
    assert s.track() == (20, 40)


def test_domain_helpers():
    assert magnitude_step(2_500_000) == 1_000_000
    assert magnitude_step(1_000) == 10_000
    assert magnitude_step(999) == 10
    d = domain_for(180_000, 18_500_000)
    assert (d.min, d.max, d.step) == (180_000, 19_000_000, 10_000)
    d = domain_for(5, 5)
    assert (d.min, d.max, d.step) == (0, 10, 10)
    assert round_to_step(15, 10) == 20
    assert round_to_step(25, 10) == 30
    assert round_to_step(24, 10) == 20


@pytest.mark.parametrize('log_scale', [False, True])
@pytest.mark.parametrize('v', [0, 1_400_000, 5_500_000, 9_990_000, 10_000_000])
def test_round_trip_within_one_step(log_scale, v):
    s = RangeSlider(0, 10_000_000, step=1_000_000, log_scale=log_scale)
    assert abs(s.to_value(s.percent(v)) - v) <= s.step


@pytest.mark.parametrize('hi,step', [(0.9, 0.3), (0.7, 0.1), (1.1, 0.1), (19.9, 0.3), (2.3, 0.7)])
def test_fractional_step_keeps_handles_apart(hi, step):
    s = RangeSlider(0, hi, step=step)
    s.set_low(hi)
    assert s.low + s.step <= s.high
    s.set_high(0)
    assert s.low + s.step <= s.high


@pytest.mark.parametrize('log_scale', [False, True])
def test_random_moves_never_cross(log_scale):
    rng = random.Random(20240611)
    for _ in range(200):
        lo = round(rng.uniform(-50, 50), rng.randint(0, 3))
        span = round(rng.uniform(0.2, 40), 1)
        step = max(0.01, round(rng.uniform(0.01, span / 2), rng.randint(1, 3)))
        s = RangeSlider(lo, lo + span, step=step, log_scale=log_scale,
                        value=(rng.uniform(lo - 5, lo + span + 5), rng.uniform(lo - 5, lo + span + 5)))
        assert s.low + s.step <= s.high
        for _ in range(25):
            action = rng.randrange(6)
            target = rng.uniform(lo - 5, lo + span + 5)
            if action == 0:
                s.set_low(target)
            elif action == 1:
                s.set_high(target)
            elif action == 2:
                s.drag_low(rng.uniform(-10, 110))
            elif action == 3:
                s.drag_high(rng.uniform(-10, 110))
            elif action == 4:
                s.commit_low_text(str(target))
            else:
                s.commit_high_text(str(target))
            assert s.low + s.step <= s.high
