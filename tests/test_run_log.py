import json

import pytest

from content.default_pack import get_default_pack
from core.config import DEFAULT_CONFIG, with_overrides
from engine.pipeline import initialize_run_state, step_update
from engine.run_log import (
    dumps_run_export,
    loads_run_export,
    make_run_export,
    run_state_from_dict,
    run_state_to_dict,
)

PACK = get_default_pack()


def _play(seed, options):
    rs = initialize_run_state(seed)
    for step, option in zip(PACK.steps, options):
        rs, _ = step_update(rs, step.choice(option).delta, option)
    return rs


def test_round_trip_is_exact():
    rs = _play(7, "ABA")
    assert run_state_from_dict(json.loads(json.dumps(run_state_to_dict(rs)))) == rs


def test_resume_continues_identically():
    full = _play(4242, "ABBAB")
    partial = _play(4242, "ABB")
    resumed = run_state_from_dict(json.loads(json.dumps(run_state_to_dict(partial))))
    for step, option in zip(PACK.steps[3:], "AB"):
        resumed, _ = step_update(resumed, step.choice(option).delta, option)
    assert resumed == full


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.pop("seed"),
        lambda d: d.update(step_count=9),
        lambda d: d.update(last_meter=d["last_meter"] + 1),
        lambda d: d["history"][0].pop("meter"),
        lambda d: d.update(state="nope"),
    ],
)
def test_malformed_run_state_rejected(mutate):
    d = run_state_to_dict(_play(1, "AB"))
    mutate(d)
    with pytest.raises(ValueError):
        run_state_from_dict(d)


def test_non_mapping_rejected():
    with pytest.raises(ValueError):
        run_state_from_dict([1, 2, 3])


def test_export_round_trip():
    cfg = with_overrides(momentum_bonus=2)
    rs = _play(99, "BA")
    text = dumps_run_export(make_run_export(run_state=rs, config=cfg, choices=["B", "A"]))
    back = loads_run_export(text)
    assert back["run_state"] == rs
    assert back["config"] == cfg
    assert back["choices"] == ["B", "A"]


@pytest.mark.parametrize("text", ["{not json", "[]", json.dumps({"version": 99})])
def test_bad_export_rejected(text):
    with pytest.raises(ValueError):
        loads_run_export(text)


def test_export_defaults_config():
    rs = initialize_run_state(5)
    back = loads_run_export(dumps_run_export(make_run_export(run_state=rs, config=DEFAULT_CONFIG, choices=[])))
    assert back["config"] == DEFAULT_CONFIG
    assert back["run_state"].step_count == 0


def _export_dict(**overrides):
    rs = _play(3, "AB")
    data = json.loads(dumps_run_export(make_run_export(run_state=rs, config=DEFAULT_CONFIG, choices=["A", "B"])))
    data.update(overrides)
    return data


@pytest.mark.parametrize(
    "overrides",
    [
        {"version": [1]},
        {"version": "1"},
        {"version": True},
        {"config": {"randomness_range": 5}},
        {"config": {"special_unluck": {"option": "C"}}},
        {"config": {"weights": {"R": "heavy"}}},
        {"config": {"unluck": {"probability": 7}}},
        {"config": [1, 2]},
        {"choices": "AB"},
        {"choices": ["A", "Z"]},
        {"run_state": {"seed": [1], "state": {}}},
        {"run_state": {"seed": 1, "state": {"R": {"x": 1}}}},
        {"run_state": {"seed": 1, "state": {}, "history": 5}},
    ],
)
def test_malformed_export_raises_value_error(overrides):
    with pytest.raises(ValueError):
        loads_run_export(json.dumps(_export_dict(**overrides)))


@pytest.mark.parametrize(
    "field, value",
    [("meter", 250), ("option", "C"), ("step", 4)],
)
def test_malformed_history_entry_rejected(field, value):
    d = run_state_to_dict(_play(1, "AB"))
    d["history"][0][field] = value
    with pytest.raises(ValueError):
        run_state_from_dict(d)
