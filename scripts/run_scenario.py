"""CLI for running elevator call scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

from lift import BuildingConfig, Call, Simulation

NARRATION = {
    "call-received": lambda p: (
        f"Event: Floor button pressed. floor: {p['call']['origin_floor']}, "
        f"direction: {p['call']['direction']}, destination: {p['call']['destination_floor']}"
    ),
    "call-assigned": lambda p: (
        f"Info: Car {p['car_id']} was assigned call from floor {p['call']['origin_floor']} "
        f"{p['call']['direction']} with destination {p['call']['destination_floor']}"
    ),
    "car-call-pressed": lambda p: f"Event: Car {p['car_id']} button pressed for floor: {p['floor']}",
    "passenger-exit": lambda p: f"Info: Car {p['car_id']} passenger(s) exiting on floor: {p['floor']}",
    "passenger-enter": lambda p: f"Info: Car {p['car_id']} passenger(s) entering on floor: {p['floor']}",
    "status": lambda p: (
        f"Status: Time: {p['time']}, car: {p['car_id']}, floor: {p['floor']}, direction: {p['direction']}"
    ),
}


def load_schedule(config: Dict) -> Dict[int, List[Call]]:
    schedule: Dict[int, List[Call]] = {}
    for tick, calls in config.get("calls", {}).items():
        schedule[int(tick)] = [
            Call(
                origin_floor=c["origin"],
                direction=c["direction"],
                destination_floor=c["destination"],
            )
            for c in calls
        ]
    return schedule


def build_simulation(config: Dict) -> Simulation:
    building_cfg = BuildingConfig.from_dict(config.get("building", {}))
    return Simulation.from_config(
        building_cfg,
        schedule=load_schedule(config),
        metrics_hook_interval=config.get("metrics_hook_interval", 1),
    )


def attach_narration(simulation: Simulation) -> None:
    for event, render in NARRATION.items():
        simulation.on_event(event, lambda payload, render=render: print(render(payload)))


def run_simulation(simulation: Simulation, config: Dict) -> int:
    duration = config.get("duration")
    if duration is None:
        return simulation.run_until_idle(config.get("max_ticks", 1000))
    simulation.run(duration)
    return duration


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
        help="Optional file path to write visited floors and metrics as JSON",
    )
    parser.add_argument("--quiet", action="store_true", help="Do not narrate events")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    config = json.loads(args.config.read_text())
    simulation = build_simulation(config)
    if not args.quiet:
        attach_narration(simulation)
    ticks = run_simulation(simulation, config)

    final_metrics = asdict(simulation.metrics.snapshot(simulation.current_time))
    visited = {
        str(car.car_id): car.visited() for car in simulation.building.cars
    }
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "ticks": ticks,
        "building": simulation.building.config.to_dict(),
        "visited": visited,
        "final_metrics": final_metrics,
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Dispatcher: {simulation.building.dispatcher_name}")
    print(f"Ticks: {ticks}")
    for car_id, floors in visited.items():
        print(f"Car {car_id} visited: {floors}")
    print("Final metrics:")
    for key, value in final_metrics.items():
        print(f"  {key}: {value}")
    if args.output:
        print(f"Saved results to {args.output}")


if __name__ == "__main__":
    main()
