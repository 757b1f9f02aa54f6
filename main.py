# main.py
"""
Main entry point for the collision simulator.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the particles, the simulation and the controls.
4. Runs the main loop, windowed (Pygame) or headless (TickScheduler).
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config
import numpy as np
import cProfile
import pstats
import io


def log_progress(sim, overlaps, log_throttle):
    """Hot loops must throttle logs: progress every `log_throttle` ticks."""
    if sim.step_count % log_throttle != 0:
        return
    logging.info(f"Simulation step {sim.step_count}")
    mean_step = np.mean([np.hypot(p.dx, p.dy) for p in sim.particles]) if len(sim) else 0.0
    logging.debug(
        f"Step {sim.step_count} | Overlapping pairs: {overlaps} | "
        f"Mean step length: {mean_step:.3f}"
    )


def run_windowed(sim, controls, vis_params, run_params):
    """Ticks the simulation on the main thread, interleaved with input and drawing."""
    from visualization import Visualizer

    visualizer = Visualizer(sim.bounds.width, sim.bounds.height, vis_params)
    log_throttle = max(1, run_params.get('log_throttle_steps', 100))
    max_steps = run_params.get('max_steps', 0)

    try:
        while True:
            # Input and ticks share this thread, so commands never land mid-tick.
            if not visualizer.handle_events(controls):
                break

            overlaps = sim.tick()
            visualizer.draw(sim)
            log_progress(sim, overlaps, log_throttle)

            if max_steps and sim.step_count >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
                break

            visualizer.wait_for_next_tick(sim.tick_interval_ms)
    finally:
        visualizer.close()


def run_headless(sim, run_params):
    """Ticks the simulation on a dedicated scheduler thread with no window."""
    from simulation import TickScheduler

    log_throttle = max(1, run_params.get('log_throttle_steps', 100))
    max_steps = run_params.get('max_steps', 0)
    scheduler = TickScheduler(
        sim, on_tick=lambda overlaps: log_progress(sim, overlaps, log_throttle)
    )
    scheduler.start(max_steps=max_steps)
    try:
        scheduler.join()
    except KeyboardInterrupt:
        logging.info("Interrupted by user.")
    finally:
        scheduler.stop()
    if scheduler.error is not None:
        raise scheduler.error
    if max_steps and sim.step_count >= max_steps:
        logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")


def main(config_path: str = 'config.json') -> int:
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config)

    logging.info("--- Collision Simulator Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from rng import RandomSource
    from simulation import Simulation
    from controls import ControlSurface

    # --- Component Initialization ---
    try:
        rng = RandomSource(sim_params.get('seed'))
        sim = Simulation.from_params(sim_params, rng)
        controls = ControlSurface.from_params(sim, sim_params)
    except ValueError:
        logging.critical("Could not initialize the simulation. See errors above.")
        return 1

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    if profiler is not None:
        profiler.enable()
    try:
        if run_params.get('headless', False):
            run_headless(sim, run_params)
        else:
            run_windowed(sim, controls, vis_params, run_params)
    finally:
        if profiler is not None:
            profiler.disable()

    logging.info(f"Simulation loop finished after {sim.step_count} ticks.")

    if profiler is not None:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Collision Simulator Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
