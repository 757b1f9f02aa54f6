# simulation.py
"""
Handles the core simulation logic.

This module defines the Simulation class, which owns every particle and the
container bounds and advances the whole system by one tick at a time. A
tick moves every particle and then scans all pairs for overlapping bounding
boxes; both members of an overlapping pair pick a new random direction.

It also defines TickScheduler, which drives Simulation.tick() at a fixed
interval on a single dedicated thread.
"""
import logging
import threading
import time
import numpy as np
from typing import Callable, Dict, Any, List, Optional
from numba import jit

from constants import (
    DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_PARTICLE_COUNT,
    DEFAULT_PARTICLE_RADIUS, DEFAULT_TICK_INTERVAL_MS, SPEED,
    PLACEMENT_MARGIN_RADII, DARK_COLOR_LIMIT
)
from particle import ContainerBounds, Particle
from rng import RandomSource

# --- Data Contracts ---
#
# class Simulation:
#   - initialize(cls, num_particles, bounds, radius, tick_interval_ms, rng, speed) -> Simulation:
#     - Inputs:
#       - num_particles: int >= 0
#       - bounds: ContainerBounds
#       - radius: float > 0, initial radius of every particle
#       - tick_interval_ms: float > 0
#       - rng: RandomSource used for placement, color and direction
#       - speed: int, step length per tick
#     - Side Effects: None beyond creating the particles.
#     - Invariants: Raises ValueError if the placement range is empty,
#       i.e. 4 * radius >= dimension - 4 * radius on either axis.
#
#   - from_params(cls, params: Dict[str, Any], rng: RandomSource) -> Simulation:
#     - Inputs: the "simulation_parameters" section of config.json.
#
#   - tick(self) -> int:
#     - Outputs: The number of overlapping pairs found this tick.
#     - Side Effects: Advances every particle, then re-randomizes the
#       direction of both members of every overlapping pair.
#     - Invariants: Particle count and order never change.
#
#   - adjust_radius(self, delta, min_radius, max_radius) -> int:
#     - Outputs: The number of particles whose radius changed.
#
#   - toggle_run_state(self) -> None
#
# tick(), adjust_radius() and toggle_run_state() are serialized by one lock,
# so a command from a UI thread is never seen half-applied inside a tick.

@jit(nopython=True)
def _count_overlaps_numba(xs, ys, radii):
    """
    Numba-jitted count of overlapping bounding-box pairs.
    """
    n = xs.shape[0]
    count = 0
    for i in range(n):
        for j in range(i + 1, n):
            reach = radii[i] + radii[j]
            if abs(xs[i] - xs[j]) <= reach and abs(ys[i] - ys[j]) <= reach:
                count += 1
    return count


@jit(nopython=True)
def _find_overlaps_numba(xs, ys, radii, count):
    """
    Numba-jitted scan for overlapping bounding-box pairs.

    Each particle's box is the closed square center +/- radius. Pairs are
    written in (i, j) order with i < j, exactly as a nested loop visits them.
    This is deliberately a box test and not a circle-distance test: circles
    whose squares overlap at the corners still count as colliding.
    """
    n = xs.shape[0]
    pairs = np.empty((count, 2), dtype=np.int64)
    k = 0
    for i in range(n):
        for j in range(i + 1, n):
            reach = radii[i] + radii[j]
            if abs(xs[i] - xs[j]) <= reach and abs(ys[i] - ys[j]) <= reach:
                pairs[k, 0] = i
                pairs[k, 1] = j
                k += 1
    return pairs


def find_overlapping_pairs(particles: List[Particle]) -> np.ndarray:
    """
    Returns an (M, 2) int array of index pairs whose bounding boxes overlap.
    """
    n = len(particles)
    xs = np.empty(n, dtype=np.float64)
    ys = np.empty(n, dtype=np.float64)
    radii = np.empty(n, dtype=np.float64)
    for i, p in enumerate(particles):
        xs[i] = p.x
        ys[i] = p.y
        radii[i] = p.radius

    # Two passes keep the result a plain preallocated array.
    count = _count_overlaps_numba(xs, ys, radii)
    return _find_overlaps_numba(xs, ys, radii, count)


def random_dark_color(rng: RandomSource) -> tuple:
    """Returns an RGB tuple with every channel in [0, DARK_COLOR_LIMIT)."""
    return (
        rng.integer(0, DARK_COLOR_LIMIT),
        rng.integer(0, DARK_COLOR_LIMIT),
        rng.integer(0, DARK_COLOR_LIMIT),
    )


class Simulation:
    """
    Owns the particle population and advances it one tick at a time.
    """
    def __init__(
        self,
        particles: List[Particle],
        bounds: ContainerBounds,
        rng: RandomSource,
        tick_interval_ms: float = DEFAULT_TICK_INTERVAL_MS,
    ):
        """
        Wraps an already built population. Most callers want initialize().

        Args:
            particles (List[Particle]): The fixed population, in scan order.
            bounds (ContainerBounds): The reflecting container.
            rng (RandomSource): Source for collision direction draws.
            tick_interval_ms (float): Wall-clock time between ticks.
        """
        self._particles = list(particles)
        self.bounds = bounds
        self.rng = rng
        self.tick_interval_ms = tick_interval_ms
        self.step_count = 0
        self._lock = threading.RLock()

    @classmethod
    def initialize(
        cls,
        num_particles: int,
        bounds: ContainerBounds,
        radius: float,
        tick_interval_ms: float,
        rng: RandomSource,
        speed: int = SPEED,
    ) -> "Simulation":
        """
        Creates a population at random positions with random directions.

        Each particle is placed at least PLACEMENT_MARGIN_RADII radii away
        from every wall and gets a random dark color.
        """
        margin = int(np.ceil(PLACEMENT_MARGIN_RADII * radius))
        errors = []
        if num_particles < 0:
            errors.append(f"particle_count must be >= 0, got {num_particles}")
        if radius <= 0:
            errors.append(f"radius must be > 0, got {radius}")
        if tick_interval_ms <= 0:
            errors.append(f"tick interval must be > 0 ms, got {tick_interval_ms}")
        if margin >= bounds.width - margin or margin >= bounds.height - margin:
            errors.append(
                f"placement range is empty: {PLACEMENT_MARGIN_RADII} * radius ({margin}) "
                f"leaves no room inside a {bounds.width}x{bounds.height} container"
            )
        if errors:
            msg = "Configuration error: " + "; ".join(errors) + "."
            logging.critical(msg)
            raise ValueError(msg)

        particles = []
        for _ in range(num_particles):
            x = rng.integer(margin, bounds.width - margin)
            y = rng.integer(margin, bounds.height - margin)
            color = random_dark_color(rng)
            p = Particle(x, y, radius, color=color, speed=speed)
            p.randomize_direction(rng)
            particles.append(p)

        logging.info(
            f"Simulation initialized with {num_particles} particles of radius "
            f"{radius} in a {bounds.width}x{bounds.height} container."
        )
        logging.debug(f"Tick interval {tick_interval_ms} ms, speed {speed} px/tick.")
        return cls(particles, bounds, rng, tick_interval_ms)

    @classmethod
    def from_params(cls, params: Dict[str, Any], rng: RandomSource) -> "Simulation":
        """Builds a simulation from the simulation_parameters config section."""
        bounds = ContainerBounds(
            int(params.get('width', DEFAULT_WIDTH)),
            int(params.get('height', DEFAULT_HEIGHT)),
        )
        return cls.initialize(
            num_particles=int(params.get('particle_count', DEFAULT_PARTICLE_COUNT)),
            bounds=bounds,
            radius=params.get('initial_radius', DEFAULT_PARTICLE_RADIUS),
            tick_interval_ms=params.get('tick_interval_ms', DEFAULT_TICK_INTERVAL_MS),
            rng=rng,
            speed=int(params.get('speed', SPEED)),
        )

    @property
    def particles(self) -> tuple:
        """The population, in scan order. Read-only view."""
        return tuple(self._particles)

    def __len__(self):
        return len(self._particles)

    @property
    def is_running(self) -> bool:
        return any(p.is_running for p in self._particles)

    def tick(self) -> int:
        """
        Executes one tick of the simulation.
        """
        with self._lock:
            try:
                # 1. Move every particle. Each one only depends on its own
                #    state and the bounds, so order does not matter.
                for p in self._particles:
                    p.advance(self.bounds)

                # 2. Scan all pairs against the post-move positions.
                pairs = find_overlapping_pairs(self._particles)

                # 3. Both members of every overlapping pair pick a new
                #    direction. A particle in k pairs is re-randomized k times.
                for i, j in pairs:
                    self._particles[i].randomize_direction(self.rng)
                    self._particles[j].randomize_direction(self.rng)
            except Exception:
                logging.critical(
                    f"Simulation fault during tick {self.step_count + 1}.", exc_info=True
                )
                raise

            self.step_count += 1
            logging.debug(f"Tick {self.step_count}: {len(pairs)} overlapping pairs.")
            return len(pairs)

    def adjust_radius(self, delta: float, min_radius: float, max_radius: float) -> int:
        """
        Changes every particle's radius by `delta`, within [min_radius, max_radius].

        A particle whose new radius would leave the range keeps its current one.
        """
        changed = 0
        with self._lock:
            for p in self._particles:
                new_radius = p.radius + delta
                if min_radius <= new_radius <= max_radius:
                    p.set_radius(new_radius)
                    changed += 1
        if changed:
            logging.info(f"Radius changed by {delta:+} for {changed} particles.")
        else:
            logging.info(
                f"Radius change of {delta:+} ignored: outside [{min_radius}, {max_radius}]."
            )
        return changed

    def toggle_run_state(self):
        """Pauses every running particle and resumes every paused one."""
        with self._lock:
            for p in self._particles:
                p.toggle_run_state()
        logging.info(f"Run state toggled. Running: {self.is_running}.")


class TickScheduler:
    """
    Calls Simulation.tick() at a fixed interval on one dedicated thread.

    Ticks are paced against a deadline, so the period is the interval and not
    the interval plus the tick's own run time. Ticks run back to back on one
    thread, so a tick never starts before the previous one has finished. If a
    tick overruns the interval the next one starts immediately and the
    schedule restarts from there instead of bursting to catch up.

    `on_tick`, if given, is called on the ticking thread after every tick
    with the number of overlapping pairs that tick found.
    """
    def __init__(
        self,
        simulation: Simulation,
        interval_ms: Optional[float] = None,
        on_tick: Optional[Callable[[int], None]] = None,
    ):
        self.simulation = simulation
        self.interval_ms = interval_ms if interval_ms is not None else simulation.tick_interval_ms
        if self.interval_ms <= 0:
            msg = f"Configuration error: tick interval must be > 0 ms, got {self.interval_ms}."
            logging.critical(msg)
            raise ValueError(msg)
        self.on_tick = on_tick
        self.ticks_run = 0
        self.error: Optional[BaseException] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, max_steps: int = 0):
        """
        Starts ticking in the background. max_steps = 0 runs until stop().
        """
        if self.is_alive:
            raise RuntimeError("TickScheduler is already running.")
        self.error = None
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, args=(max_steps,), name="tick-scheduler", daemon=True
        )
        self._thread.start()
        logging.info(f"Tick scheduler started ({self.interval_ms} ms interval).")

    def stop(self, timeout: Optional[float] = None):
        """Signals the thread to stop and waits for it to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
        logging.info(f"Tick scheduler stopped after {self.ticks_run} ticks.")

    def join(self, timeout: Optional[float] = None):
        if self._thread is not None:
            self._thread.join(timeout)

    def run_for(self, steps: int):
        """Runs exactly `steps` paced ticks on the calling thread."""
        if self.is_alive:
            raise RuntimeError("TickScheduler is already running in the background.")
        if steps <= 0:
            return
        self.error = None
        self._stop_event.clear()
        self._run(steps)
        if self.error is not None:
            raise self.error

    def _run(self, max_steps: int):
        interval_s = self.interval_ms / 1000.0
        steps_done = 0
        deadline = time.monotonic()
        while not self._stop_event.is_set():
            try:
                overlaps = self.simulation.tick()
                if self.on_tick is not None:
                    self.on_tick(overlaps)
            except Exception as e:
                # Keep it for the owner and stop.
                self.error = e
                logging.error("Tick scheduler stopping after a fault.", exc_info=True)
                break
            self.ticks_run += 1
            steps_done += 1
            if max_steps and steps_done >= max_steps:
                break

            deadline += interval_s
            now = time.monotonic()
            if deadline < now:
                # Overran: start the next tick now and pace from here.
                deadline = now
            self._stop_event.wait(deadline - now)
