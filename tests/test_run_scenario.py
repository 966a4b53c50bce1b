from __future__ import annotations

import json
from pathlib import Path

from run_scenario import build_system, run_scenario

SCENARIO = Path(__file__).resolve().parent.parent / "scripts" / "scenarios" / "lobby_rush.json"


def test_lobby_rush_scenario_serves_every_call():
    config = json.loads(SCENARIO.read_text())
    system = build_system(config)
    snapshots = run_scenario(system, config["events"], config["duration"], config["sample_every"])
    assert len(snapshots) == config["duration"] // config["sample_every"]
    assert system.policy_name == "sstf"
    assert system.pending_calls == []
    assert all(car.is_idle for car in system.cars)
    final = system.metrics.snapshot(system.clock.now)
    assert final.served == 9
    assert final.average_wait > 0


def test_configure_event_rebuilds_building():
    config = {
        "building": {"num_floors": 6, "num_cars": 2},
        "timing": {"random_seed": 1},
        "events": [
            {"time": 0, "type": "call", "floor": 5, "direction": "down"},
            {"time": 3, "type": "configure", "num_floors": 8, "num_cars": 4},
            {"time": 4, "type": "mode", "mode": "manual"},
            {"time": 5, "type": "call", "floor": 7, "direction": "down"},
            {"time": 6, "type": "bogus"},
        ],
    }
    system = build_system(config)
    run_scenario(system, config["events"], 60, 30)
    assert len(system.cars) == 4
    assert [c.floor for c in system.pending_calls] == [7]
    assert system.metrics.snapshot(system.clock.now).served == 0
