import pytest

from st_signal.errors import InvalidInputError
from st_signal.supertrend import DOWN, UP, BandState, compute_supertrend, supertrend_step
from st_signal.types import BUY, SELL, Candle


def test_crossover_scenario(make_candles, crossover_closes):
    candles = make_candles(crossover_closes)
    points = compute_supertrend(candles, atr_period=2, multiplier=1.0)

    assert len(points) == len(candles)
    assert [p.timestamp for p in points] == [c.timestamp for c in candles]

    signals = {i: p.signal for i, p in enumerate(points) if p.signal is not None}
    assert signals == {7: SELL, 10: BUY}

    # uptrend: trend value follows the (sticky) lower band
    assert points[2].trend_value == pytest.approx(6.0)
    assert points[3].trend_value == pytest.approx(9.25)
    assert points[6].trend_value == pytest.approx(14.21875)
    # downtrend: trend value follows the (sticky) upper band
    assert points[7].trend_value == pytest.approx(15.140625)
    assert points[8].trend_value == pytest.approx(11.8203125)
    assert points[9].trend_value == pytest.approx(9.16015625)
    # back to uptrend
    assert points[10].trend_value == pytest.approx(6.169921875)
    assert points[11].trend_value == pytest.approx(9.8349609375)


def test_warmup_points_are_absent(make_candles, crossover_closes):
    points = compute_supertrend(make_candles(crossover_closes), atr_period=4, multiplier=2.0)
    for p in points[:4]:
        assert p.trend_value is None
        assert p.signal is None
    assert points[4].trend_value is not None
    # no signal at the first usable candle
    assert points[4].signal is None


def test_fewer_candles_than_period_is_not_an_error(make_candles):
    points = compute_supertrend(make_candles([1, 2, 3]), atr_period=10, multiplier=3.0)
    assert [p.trend_value for p in points] == [None, None, None]
    assert [p.signal for p in points] == [None, None, None]


@pytest.mark.parametrize("seed", [1, 7, 42, 2024])
def test_signals_strictly_alternate(walk_candles, seed):
    points = compute_supertrend(walk_candles(400, seed=seed), atr_period=5, multiplier=1.5)
    signals = [p.signal for p in points if p.signal is not None]
    assert len(signals) >= 2
    assert all(a != b for a, b in zip(signals, signals[1:]))


def test_seed_step_never_signals_even_if_direction_is_down():
    candle = Candle(timestamp=0, open=9.0, high=11.0, low=7.0, close=7.5)
    state, point = supertrend_step(None, candle, prev_close=9.0, atr=1.0, multiplier=1.0)

    assert state.direction == DOWN
    assert point.signal is None
    assert point.trend_value == pytest.approx(10.0)
    assert state.trend_value == state.upper_band


def test_upper_band_sticks_unless_previous_close_breaks_it():
    prev = BandState(upper_band=10.0, lower_band=6.0, trend_value=10.0, direction=DOWN)
    candle = Candle(timestamp=1, open=9.0, high=10.0, low=8.0, close=9.0)

    # raw upper band 9 + 3 = 12 > 10, previous close below 10: keep 10
    state, point = supertrend_step(prev, candle, prev_close=9.5, atr=3.0, multiplier=1.0)
    assert state.upper_band == pytest.approx(10.0)
    assert state.direction == DOWN
    assert point.signal is None

    # previous close above the previous upper band releases it
    state, _ = supertrend_step(prev, candle, prev_close=10.5, atr=3.0, multiplier=1.0)
    assert state.upper_band == pytest.approx(12.0)


def test_lower_band_sticks_unless_previous_close_breaks_it():
    prev = BandState(upper_band=14.0, lower_band=8.0, trend_value=8.0, direction=UP)
    candle = Candle(timestamp=1, open=9.0, high=10.0, low=8.0, close=9.0)

    # raw lower band 9 - 3 = 6 < 8: keep 8
    state, _ = supertrend_step(prev, candle, prev_close=9.0, atr=3.0, multiplier=1.0)
    assert state.lower_band == pytest.approx(8.0)

    state, _ = supertrend_step(prev, candle, prev_close=7.5, atr=3.0, multiplier=1.0)
    assert state.lower_band == pytest.approx(6.0)


def test_equal_band_keeps_previous():
    prev = BandState(upper_band=12.0, lower_band=6.0, trend_value=6.0, direction=UP)
    candle = Candle(timestamp=1, open=9.0, high=10.0, low=8.0, close=9.0)
    state, _ = supertrend_step(prev, candle, prev_close=9.0, atr=3.0, multiplier=1.0)
    assert state.upper_band == 12.0
    assert state.lower_band == 6.0


def test_close_above_upper_band_flips_downtrend_to_buy():
    prev = BandState(upper_band=10.0, lower_band=6.0, trend_value=10.0, direction=DOWN)
    candle = Candle(timestamp=1, open=10.0, high=11.0, low=9.0, close=10.8)
    state, point = supertrend_step(prev, candle, prev_close=9.5, atr=1.0, multiplier=1.0)

    # raw upper 11 > 10, prev close 9.5 < 10: upper stays 10, close 10.8 breaks it
    assert state.direction == UP
    assert point.signal == BUY
    assert point.trend_value == state.lower_band == pytest.approx(9.0)


def test_close_below_lower_band_flips_uptrend_to_sell():
    prev = BandState(upper_band=14.0, lower_band=8.0, trend_value=8.0, direction=UP)
    candle = Candle(timestamp=1, open=8.0, high=8.5, low=7.0, close=7.2)
    state, point = supertrend_step(prev, candle, prev_close=8.5, atr=1.0, multiplier=1.0)

    # raw lower 6.75 < 8, prev close 8.5 >= 8: lower stays 8, close 7.2 breaks it
    assert state.lower_band == pytest.approx(8.0)
    assert state.direction == DOWN
    assert point.signal == SELL
    assert point.trend_value == state.upper_band == pytest.approx(8.75)


def test_invocations_do_not_share_state(make_candles, crossover_closes):
    candles = make_candles(crossover_closes)
    first = compute_supertrend(candles, 2, 1.0)
    compute_supertrend(make_candles([100, 50, 200, 10, 300, 5]), 2, 1.0)
    assert compute_supertrend(candles, 2, 1.0) == first


@pytest.mark.parametrize("multiplier", [0, -1.0, float("nan")])
def test_invalid_multiplier_rejected(make_candles, crossover_closes, multiplier):
    with pytest.raises(InvalidInputError):
        compute_supertrend(make_candles(crossover_closes), 2, multiplier)


def test_empty_candles_rejected():
    with pytest.raises(InvalidInputError):
        compute_supertrend([], 10, 3.0)
