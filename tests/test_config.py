import json

import pytest

from core.config import DEFAULT_CONFIG, config_from_mapping, config_to_dict, with_overrides


def test_defaults():
    assert DEFAULT_CONFIG.weights.R == 0.30
    assert DEFAULT_CONFIG.sigmoid.mu == -4.0
    assert DEFAULT_CONFIG.momentum_bonus == 3
    assert DEFAULT_CONFIG.randomness_range == (-5, 5)
    assert DEFAULT_CONFIG.unluck.probability == 0.10
    assert DEFAULT_CONFIG.special_unluck.step == 4


def test_nested_override_keeps_siblings():
    cfg = with_overrides(unluck={"probability": 1.0})
    assert cfg.unluck.probability == 1.0
    assert cfg.unluck.factor_range == (0.4, 0.7)
    assert DEFAULT_CONFIG.unluck.probability == 0.10


def test_unknown_nested_key_rejected():
    with pytest.raises(ValueError):
        with_overrides(unluck={"chance": 0.5})


def test_inverted_range_rejected():
    with pytest.raises(ValueError):
        with_overrides(randomness_range=(5, -5))
    with pytest.raises(ValueError):
        with_overrides(unluck={"factor_range": [0.9, 0.1]})


def test_from_mapping_rejects_unknown_and_bad_sections():
    with pytest.raises(ValueError):
        config_from_mapping({"turbo": True})
    with pytest.raises(ValueError):
        config_from_mapping({"weights": 3})


def test_dict_round_trip_through_json():
    data = json.loads(json.dumps(config_to_dict(DEFAULT_CONFIG)))
    assert config_from_mapping(data) == DEFAULT_CONFIG


def test_partial_mapping_starts_from_defaults():
    cfg = config_from_mapping({"momentum_bonus": 0, "sigmoid": {"sigma": 9.0}})
    assert cfg.momentum_bonus == 0
    assert cfg.sigmoid == type(DEFAULT_CONFIG.sigmoid)(mu=-4.0, sigma=9.0)


@pytest.mark.parametrize(
    "data",
    [
        {"randomness_range": 5},
        {"randomness_range": [1, 2, 3]},
        {"randomness_range": ["a", "b"]},
        {"unluck": {"factor_range": None}},
        {"weights": {"R": "0.3"}},
        {"weights": {"U": True}},
        {"sigmoid": {"sigma": 0}},
        {"diminishing_returns": -1.0},
        {"momentum_bonus": 2.5},
        {"rubber_band": {"threshold": "30"}},
        {"unluck": {"probability": 1.5}},
        {"unluck": {"probability": -0.1}},
        {"special_unluck": {"option": "C"}},
        {"special_unluck": {"option": None}},
        {"special_unluck": {"enabled": "yes"}},
        {"special_unluck": {"step": 4.0}},
        {"special_unluck": {"customers_reduction": 2}},
        {"bottleneck_threshold": "10"},
        {"sigmoid": {"mu": float("nan")}},
    ],
)
def test_malformed_leaves_rejected(data):
    with pytest.raises(ValueError):
        config_from_mapping(data)


def test_non_mapping_config_rejected():
    with pytest.raises(ValueError):
        config_from_mapping([("momentum_bonus", 1)])


def test_unknown_top_level_override_rejected():
    with pytest.raises(ValueError):
        with_overrides(turbo=True)


def test_option_is_normalized():
    cfg = config_from_mapping({"special_unluck": {"option": " b "}, "unluck": {"probability": 1.0}})
    assert cfg.special_unluck.option == "B"


def test_bad_option_never_reaches_a_game():
    from core.state import Delta, RunState, State
    from engine.pipeline import step_update

    with pytest.raises(ValueError):
        config_from_mapping({"special_unluck": {"option": "C"}, "unluck": {"probability": 1.0}})
    cfg = config_from_mapping({"special_unluck": {"option": "A"}, "unluck": {"probability": 1.0}})
    _, r = step_update(RunState(state=State(), seed=1, step_count=3), Delta(C=7), "B", cfg)
    assert r.unluck_applied
    assert not r.special_unluck_applied
