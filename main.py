"""Main entry point for a headless Lane Rush session.

Runs the simulation faster than real time with a simple lane-picking
autopilot, then logs a summary. Useful for balancing and soak testing:

- fixed seed for reproducible runs
- optional JSON save file for the durable counters
- optional record service URL for posting the finished game
"""

import argparse
import logging
import sys

from racecore.config.display import FRAME_TIME_MS, get_lane_positions
from racecore.config.difficulty import DIFFICULTY_LEVELS
from racecore.config.game_config import GameConfig
from racecore.config.vehicles import VEHICLE_PRESETS, get_preset
from racecore.exceptions import PersistenceError
from racecore.persistence import JsonFileStore, MemoryStore, SaveData
from racecore.simulation import SimulationEngine
from racecore.state_machine import GameStatus
from raceservices import GameRecorder, RecordServiceClient, configure_logging

logger = logging.getLogger(__name__)

SEPARATOR_WIDTH = 60


def choose_lane(engine: SimulationEngine) -> int:
    """Pick the lane whose nearest obstacle ahead is furthest away."""
    state = engine.state
    vehicle = state.vehicle
    lanes = get_lane_positions()
    clearance = []
    for lane in range(len(lanes)):
        ahead = [
            vehicle.y - obstacle.bottom
            for obstacle in state.obstacles
            if obstacle.lane == lane and obstacle.bottom <= vehicle.bottom
        ]
        attacks = [
            vehicle.y - attack.bottom
            for attack in state.boss_battle.attacks
            if abs(attack.center[0] - lanes[lane]) < attack.width / 2 + vehicle.width / 2
        ]
        clearance.append(min(ahead + attacks, default=float("inf")))
    best = max(clearance)
    # Stay put when the current lane is as good as any other
    if clearance[vehicle.lane] == best:
        return vehicle.lane
    return clearance.index(best)


def run_headless(
    seconds: float,
    seed=None,
    difficulty: str = "medium",
    vehicle_id: str = "sporty",
    save_file=None,
    record_url=None,
    username: str = "autopilot",
) -> SimulationEngine:
    """Run one session for ``seconds`` of simulated time or until game over."""
    try:
        store = JsonFileStore(save_file) if save_file else MemoryStore()
    except PersistenceError as e:
        logger.error("Cannot open save file: %s", e)
        sys.exit(1)

    save_data = SaveData(store)
    config = GameConfig(difficulty_level=difficulty, username=username)
    engine = SimulationEngine(config, seed=seed, save_data=save_data)

    client = RecordServiceClient(record_url) if record_url else None
    recorder = GameRecorder(save_data, client)
    recorder.attach(engine)

    engine.load_vehicle(get_preset(vehicle_id))
    now_ms = 0.0
    engine.start(now_ms=now_ms)
    lanes = get_lane_positions()

    max_frames = int(seconds * 1000 / FRAME_TIME_MS)
    for _ in range(max_frames):
        if engine.status != GameStatus.PLAYING:
            break
        engine.set_drag(lanes[choose_lane(engine)], dragging=True)
        now_ms += FRAME_TIME_MS
        engine.advance(now_ms=now_ms)

    log_summary(engine)
    if client is not None:
        client.close()
    return engine


def log_summary(engine: SimulationEngine) -> None:
    state = engine.state
    stats = state.statistics
    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("LANE RUSH - SESSION SUMMARY")
    logger.info("=" * SEPARATOR_WIDTH)
    logger.info("Status: %s after %d ticks", state.status.value, engine.frame_count)
    logger.info("Distance: %.0f  Score: %d  Coins: %d", state.distance, state.score, state.coins)
    logger.info("Hearts: %d  Top speed: %.1f", state.hearts, state.top_speed_reached)
    logger.info("Obstacles destroyed: %d", stats.total_obstacles_destroyed)
    logger.info("Bosses met: %d", len(stats.boss_records))
    for key, stat in sorted(stats.power_up_stats.items()):
        logger.info("  %-22s collected=%d crafted=%d", key, stat.collected, stat.combo_crafted)
    logger.info("High score: %d", engine.save_data.high_score)
    logger.info("=" * SEPARATOR_WIDTH)


def main():
    """Parse command-line arguments and run a headless session."""
    parser = argparse.ArgumentParser(
        description="Lane Rush headless simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Two simulated minutes on medium
  python main.py --seconds 120

  # Reproducible hard run with a persistent save file
  python main.py --seconds 600 --seed 42 --difficulty hard --save-file save.json
        """,
    )
    parser.add_argument(
        "--seconds", type=float, default=60.0, help="Simulated seconds to run (default: 60)"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for deterministic behavior (optional)"
    )
    parser.add_argument(
        "--difficulty",
        choices=sorted(DIFFICULTY_LEVELS),
        default="medium",
        help="Difficulty level (default: medium)",
    )
    parser.add_argument(
        "--vehicle",
        choices=[preset.id for preset in VEHICLE_PRESETS],
        default="sporty",
        help="Vehicle preset (default: sporty)",
    )
    parser.add_argument(
        "--save-file", type=str, default=None, metavar="FILENAME", help="JSON save data file"
    )
    parser.add_argument(
        "--record-url", type=str, default=None, help="Base URL of the record service (optional)"
    )
    parser.add_argument("--username", type=str, default="autopilot")
    parser.add_argument("--log-level", type=str, default=None, help="Overrides LANE_RUSH_LOG_LEVEL")

    args = parser.parse_args()
    configure_logging(level=args.log_level)

    logger.info(
        "Starting headless session: %.0f s, difficulty=%s, vehicle=%s, seed=%s",
        args.seconds,
        args.difficulty,
        args.vehicle,
        args.seed,
    )
    run_headless(
        args.seconds,
        seed=args.seed,
        difficulty=args.difficulty,
        vehicle_id=args.vehicle,
        save_file=args.save_file,
        record_url=args.record_url,
        username=args.username,
    )


if __name__ == "__main__":
    main()
