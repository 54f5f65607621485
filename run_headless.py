# run_headless.py

"""
================================================================================
HEADLESS SIMULATION RUNNER
================================================================================
A command-line tool that advances a simulation without opening a window and
writes PNG snapshots of the chosen palette at a fixed tick interval. Useful
for long runs, for comparing parameter sets and on machines without a display.

Usage:
    python run_headless.py --config configs/config.json --ticks 5000 \
        --snapshot-every 500 --palette terrain --output snapshots
================================================================================
"""
import os
import sys
import time
import logging
import argparse
import numpy as np
from PIL import Image
from tqdm import tqdm

from watershed import shading
from watershed.loader import ConfigError, load_parameters
from watershed.parameters import ClimateParameters
from watershed.runtime import Simulation


def save_snapshot(color_array: np.ndarray, directory: str, tick: int, palette: str) -> str:
    """
    Saves one color array as a PNG and returns its path.
    """
    os.makedirs(directory, exist_ok=True)
    file_path = os.path.join(directory, f"{palette}_{tick:07d}.png")

    # Pillow works with (height, width, channels) arrays, so we need to transpose
    # the [x, y] color array first.
    img_data = np.ascontiguousarray(np.transpose(color_array, (1, 0, 2)))
    Image.fromarray(img_data, 'RGB').save(file_path, 'PNG')
    return file_path


def run_headless(config_path: str, ticks: int, snapshot_every: int, output_dir: str, palettes: list) -> int:
    """
    Runs the simulation and writes snapshots.

    Returns:
        int: Process exit status (0 on success).
    """
    # 1. --- Setup Logging ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("Headless")

    # 2. --- Load Configuration ---
    try:
        if config_path:
            params = load_parameters(config_path, logger)
        else:
            logger.info("No configuration given, using internal defaults.")
            params = ClimateParameters()
    except (FileNotFoundError, ConfigError) as e:
        logger.critical(f"Failed to load configuration: {e}")
        return 1

    unknown = [p for p in palettes if p not in shading.PALETTES]
    if unknown:
        logger.critical(f"Unknown palette(s): {', '.join(unknown)}. "
                        f"Available: {', '.join(shading.PALETTES)}")
        return 1

    # 3. --- Initialize the Simulation ---
    simulation = Simulation(params, logger=logger)
    initial_mass = simulation.total_mass()

    # 4. --- Main Loop ---
    start_time = time.perf_counter()
    written = 0
    for _ in tqdm(range(ticks), desc="Simulating", unit="tick"):
        simulation.step()
        if snapshot_every > 0 and simulation.tick % snapshot_every == 0:
            state = simulation.snapshot()
            for palette in palettes:
                save_snapshot(shading.get_color_array(state, palette), output_dir, simulation.tick, palette)
                written += 1

    # --- Finalization ---
    elapsed = time.perf_counter() - start_time
    final_mass = simulation.total_mass()
    logger.info(f"Simulated {ticks} ticks in {elapsed:.2f} seconds "
                f"({ticks / elapsed if elapsed > 0 else 0.0:.1f} ticks/s).")
    logger.info(f"Total water + vapor: {initial_mass:.3f} -> {final_mass:.3f}")
    logger.info(f"Wrote {written} snapshot(s) to: {output_dir}")
    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Headless runner for the watershed simulation.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to the JSON configuration file. Internal defaults are used if omitted."
    )
    parser.add_argument("--ticks", type=int, default=1000, help="Number of ticks to simulate.")
    parser.add_argument(
        "--snapshot-every",
        type=int,
        default=100,
        help="Write snapshots every N ticks (0 disables snapshots)."
    )
    parser.add_argument("--output", type=str, default="snapshots", help="Snapshot directory.")
    parser.add_argument(
        "--palette",
        action="append",
        default=None,
        help="Palette to snapshot; may be repeated. Defaults to 'terrain'."
    )
    args = parser.parse_args()

    sys.exit(run_headless(args.config, args.ticks, args.snapshot_every, args.output,
                          args.palette or ["terrain"]))
