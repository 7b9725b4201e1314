"""
Main Execution Script for the Relief Resource Allocator.

Runs the day loop: process requests -> check stock -> maybe a disaster ->
daily report -> new requests -> periodic report file.
"""

import os
import sys
import logging
from pathlib import Path
from typing import Optional

# Add current directory to path so imports work
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from models import SimulationConfig
from allocator.disruption import DisasterSimulator
from allocator.engine import AllocationEngine
from allocator.event_log import EventLogger
from allocator.network import RoutingGraph
from allocator.report import ReportGenerator
from generators.data_factory import DataGenerator, load_scenario, save_scenario

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("Main")

# --- CONFIGURATION ---
CONFIG_FILENAME = "simulation_config.json"
SCENARIO_FILENAME = "scenario.json"
USE_SCENARIO_CACHE = False  # Set to True to replay a saved scenario instead of the demo
# ---------------------


def load_config(filename: str = CONFIG_FILENAME) -> SimulationConfig:
    if Path(filename).exists():
        logger.info(f"Loading configuration from {filename}")
        return SimulationConfig.from_json_file(filename)
    return SimulationConfig()


def prompt_days() -> int:
    """Ask the operator for a day count until they give one between 1 and 10."""
    while True:
        raw = input("Enter number of days to simulate (1-10): ")
        try:
            days = int(raw)
        except ValueError:
            print("Invalid input. Please enter a number between 1 and 10.")
            continue
        if 1 <= days <= 10:
            return days
        print("Please enter a number between 1 and 10.")


def build_engine(config: SimulationConfig, generator: DataGenerator) -> AllocationEngine:
    if USE_SCENARIO_CACHE:
        engine = load_scenario(SCENARIO_FILENAME, allow_partial=config.allow_partial_fulfillment)
        if engine is not None:
            return engine

    network = RoutingGraph(
        seed=config.network_seed,
        seed_initial_load=config.seed_initial_load,
        initial_load_range=config.initial_load_range
    )
    engine = AllocationEngine(network, allow_partial=config.allow_partial_fulfillment)
    generator.build_demo_scenario(engine)
    save_scenario(engine, SCENARIO_FILENAME)
    return engine


def run(config: SimulationConfig) -> AllocationEngine:
    generator = DataGenerator(
        seed=config.request_seed,
        hub_location_id=config.hub_location_id,
        request_count_range=config.daily_request_range,
        quantity_range=config.request_quantity_range,
        priority_range=config.request_priority_range
    )
    engine = build_engine(config, generator)

    event_logger = EventLogger(config.event_log_file)
    engine.subscribe(event_logger)

    disasters = DisasterSimulator(
        engine,
        seed=config.disaster_seed,
        hub_location_id=config.hub_location_id,
        shortage_percent_range=config.shortage_percent_range
    )
    reports = ReportGenerator(engine)
    report_dir = Path(config.report_dir)

    logger.info("Starting Resource Allocation Simulation...")
    try:
        for day in range(1, config.days + 1):
            event_logger.log(f"Beginning of Day {day}")

            summary = engine.run_cycle(day)
            if summary.critical_resources:
                logger.warning(f"Critical resources: {', '.join(summary.critical_resources)}")

            record = disasters.maybe_run(config.disaster_probability)
            if record:
                logger.warning(f"Disaster: {record.description}")

            print(reports.daily_status(day))

            if day < config.days:
                for request in generator.generate_daily_requests(engine):
                    event_logger.log_request(request)

            if day % config.report_every == 0:
                reports.save(report_dir / f"day_{day}_report.txt", day)
    finally:
        engine.listeners.remove(event_logger)
        event_logger.close()

    print("\n" + "=" * 50)
    print("FINAL SIMULATION REPORT")
    print("=" * 50)
    print(reports.full_report())
    print(engine.state.get_statistics())

    reports.save(report_dir / "final_simulation_report.txt")
    reports.save_json(report_dir / "dashboard_data.json")
    return engine


def main(days: Optional[int] = None):
    logger.info("=== Resource Allocation System Simulation ===")
    config = load_config()
    if days is None:
        days = prompt_days()
    config = config.model_copy(update={"days": days})
    run(config)
    print("\nSimulation Completed.")


if __name__ == "__main__":
    main()
