import pytest

from core.config import with_overrides
from core.meter import compute_meter, normalize, raw_score
from core.state import Delta, EffectiveState
from engine.pipeline import initialize_run_state, step_update

MID = lambda: 0.5  # noqa: E731  randomness 0


def test_raw_score_uses_weights():
    assert raw_score(EffectiveState(R=10, U=8, S=6, C=4, I=2)) == pytest.approx(7.0)


def test_raw_score_custom_weights():
    cfg = with_overrides(weights={"R": 1.0, "U": 0.0, "S": 0.0, "C": 0.0, "I": 0.0})
    assert raw_score(EffectiveState(R=3, U=100), cfg) == pytest.approx(3.0)


def test_baseline_meter_for_empty_state():
    # 100 * sigmoid(4 / 11)
    assert normalize(0.0) == 59


def test_momentum_applied_on_increase():
    r = compute_meter(EffectiveState(), 0, MID)
    assert r.momentum == 3
    assert r.meter == 62


@pytest.mark.parametrize("last_meter", [59, 70])
def test_no_momentum_when_flat_or_down(last_meter):
    r = compute_meter(EffectiveState(), last_meter, MID)
    assert r.momentum == 0
    assert r.meter == 59


@pytest.mark.parametrize("draw, expected", [(0.0, -5), (0.25, -2), (0.5, 0), (0.75, 3), (0.9999999, 5)])
def test_randomness_bounds(draw, expected):
    r = compute_meter(EffectiveState(), 100, lambda: draw)
    assert r.randomness == expected
    assert r.meter == 59 + expected


def test_randomness_range_configurable():
    cfg = with_overrides(randomness_range=(0, 0))
    assert compute_meter(EffectiveState(), 100, lambda: 0.99, cfg).randomness == 0


def test_clamped_high():
    r = compute_meter(EffectiveState(R=1000), 0, lambda: 0.9999999)
    assert r.meter == 100
    assert r.raw == pytest.approx(300.0)


def test_clamped_low_sets_rubber_band():
    cfg = with_overrides(sigmoid={"mu": 100.0})
    r = compute_meter(EffectiveState(), 0, lambda: 0.0, cfg)
    assert r.meter == 0
    assert r.rubber_band


def test_rubber_band_flag_threshold():
    assert not compute_meter(EffectiveState(), 100, MID).rubber_band
    cfg = with_overrides(rubber_band={"threshold": 60})
    assert compute_meter(EffectiveState(), 100, MID, cfg).rubber_band


def test_exactly_one_draw():
    calls = []

    def rng():
        calls.append(1)
        return 0.5

    compute_meter(EffectiveState(R=5), 0, rng)
    assert len(calls) == 1


@pytest.mark.parametrize("size", [10**6, -(10**6)])
@pytest.mark.parametrize("seed", [1, 7, 12345])
def test_extreme_deltas_keep_meter_in_range(size, seed):
    rs = initialize_run_state(seed)
    for option in "ABABA":
        rs, r = step_update(rs, Delta(R=size, U=size, S=size, C=size, I=size), option)
        assert isinstance(r.meter, int)
        assert 0 <= r.meter <= 100
        assert rs.last_meter == r.meter
