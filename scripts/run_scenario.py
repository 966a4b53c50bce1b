"""CLI for running offline elevator bank scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from simulation import ElevatorSystem, SimpyClock, SystemConfig, TimingModel

logger = logging.getLogger("run_scenario")


def build_system(config: Dict) -> ElevatorSystem:
    building_cfg = config.get("building", {})
    timing_cfg = config.get("timing", {})
    system_config = SystemConfig(
        num_floors=building_cfg.get("num_floors", 10),
        num_cars=building_cfg.get("num_cars", 3),
        policy=config.get("policy", "look"),
        mode=config.get("mode", "automatic"),
        timing=TimingModel(**timing_cfg),
    )
    return ElevatorSystem(system_config, clock=SimpyClock())


def _apply_event(system: ElevatorSystem, event: Dict) -> None:
    kind = event.get("type")
    if kind == "call":
        system.call(event["floor"], event["direction"])
    elif kind == "move":
        system.move_car(event["car_id"], event["floor"])
    elif kind == "assign":
        system.assign(event["call_id"], event["car_id"])
    elif kind == "auto_assign":
        system.auto_assign_all()
    elif kind == "policy":
        system.set_policy(event["name"])
    elif kind == "mode":
        system.set_mode(event["mode"])
    elif kind == "configure":
        system.configure(event["num_floors"], event["num_cars"])
    else:
        logger.warning("Skipping unknown event type %r", kind)


def run_scenario(system: ElevatorSystem, events: Iterable[Dict], duration: float, sample_every: float) -> List[Dict]:
    clock = system.clock
    snapshots: List[Dict] = []
    timeline = sorted(events, key=lambda e: e.get("time", 0))
    next_sample = sample_every

    for event in timeline:
        at = float(event.get("time", 0))
        while next_sample <= at and next_sample <= duration:
            clock.run(until=next_sample)
            snapshots.append(asdict(system.metrics.snapshot(clock.now)))
            next_sample += sample_every
        if at > duration:
            break
        clock.run(until=at)
        _apply_event(system, event)

    while next_sample <= duration:
        clock.run(until=next_sample)
        snapshots.append(asdict(system.metrics.snapshot(clock.now)))
        next_sample += sample_every
    clock.run(until=duration)
    return snapshots


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write metrics snapshots as JSON",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every car state transition")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = json.loads(args.config.read_text())
    system = build_system(config)
    duration = float(config.get("duration", 300))
    snapshots = run_scenario(system, config.get("events", []), duration, float(config.get("sample_every", 10)))

    final_metrics = asdict(system.metrics.snapshot(system.clock.now))
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "duration": duration,
        "policy": system.policy_name,
        "final_metrics": final_metrics,
        "final_state": system.snapshot(),
        "metrics_over_time": snapshots,
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Policy: {results['policy']}")
    print(f"Duration: {duration:g} s")
    print("Final metrics:")
    for key, value in final_metrics.items():
        print(f"  {key}: {value}")
    if args.output:
        print(f"Saved metrics to {args.output}")


if __name__ == "__main__":
    main()
