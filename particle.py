# particle.py
"""
Defines a single particle and the container it moves in.

A Particle owns one circle's geometry (center, radius) and kinematics
(an integer step per tick). It moves in a straight line, reflects off the
walls of its container, and can re-randomize its direction while keeping
its step length at most SPEED. It knows nothing about drawing or about
other particles; pairwise interaction is handled by the Simulation.
"""
import enum
import math
from typing import NamedTuple, Tuple

from constants import SPEED
from rng import RandomSource

# --- Data Contracts ---
#
# class ContainerBounds(NamedTuple):
#   - width: int, height: int. Immutable. The top-left corner is (0, 0).
#
# class Particle:
#   - __init__(self, x, y, radius, color=(0, 0, 0), velocity=(0, 0), speed=SPEED):
#     - Side Effects: None. The caller assigns a direction, either through
#       `velocity` or by calling randomize_direction().
#
#   - advance(self, bounds: ContainerBounds) -> None:
#     - Side Effects: Mutates center and possibly velocity.
#     - Invariants: Afterwards radius <= x <= width - radius and
#       radius <= y <= height - radius. Never raises.
#
#   - randomize_direction(self, rng: RandomSource) -> None:
#     - Side Effects: Replaces velocity.
#     - Invariants: dx != 0 and dx**2 + dy**2 <= speed**2.

class ContainerBounds(NamedTuple):
    """The reflecting rectangle particles live in."""
    width: int
    height: int


class RunState(enum.Enum):
    RUNNING = "running"
    PAUSED = "paused"


class Particle:
    """
    A circle moving at constant speed inside a ContainerBounds.
    """
    def __init__(
        self,
        x: float,
        y: float,
        radius: float,
        color: Tuple[int, int, int] = (0, 0, 0),
        velocity: Tuple[int, int] = (0, 0),
        speed: int = SPEED,
    ):
        """
        Creates a particle.

        Args:
            x (float): x coordinate of the center.
            y (float): y coordinate of the center.
            radius (float): Radius of the circle.
            color (Tuple[int, int, int]): RGB color, only used for drawing.
            velocity (Tuple[int, int]): Initial (dx, dy) step per tick.
            speed (int): Maximum step length used by randomize_direction().
        """
        self.x = float(x)
        self.y = float(y)
        self.radius = float(radius)
        self.color = color
        self.dx, self.dy = int(velocity[0]), int(velocity[1])
        self.speed = speed
        self.run_state = RunState.RUNNING

    def __repr__(self):
        return (
            f"Particle(center=({self.x:.1f}, {self.y:.1f}), radius={self.radius}, "
            f"velocity=({self.dx}, {self.dy}), {self.run_state.value})"
        )

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def velocity(self) -> Tuple[int, int]:
        return (self.dx, self.dy)

    @property
    def is_running(self) -> bool:
        return self.run_state is RunState.RUNNING

    def advance(self, bounds: ContainerBounds):
        """
        Moves the particle one tick, reflecting off the container walls.

        The reflection test uses the tentative next position, so a particle
        that would cross a wall reverses on this tick instead of the next.
        """
        if self.run_state is RunState.PAUSED:
            return

        r = self.radius

        # Reverse any component whose move would cross a wall.
        next_x = self.x + self.dx
        if next_x + r >= bounds.width or next_x - r < 0:
            self.dx = -self.dx
        next_y = self.y + self.dy
        if next_y + r >= bounds.height or next_y - r < 0:
            self.dy = -self.dy

        next_x = self.x + self.dx
        next_y = self.y + self.dy

        # Bring the particle back inside if the reversed move still overshoots.
        if next_x < r:
            next_x = r
        if next_y < r:
            next_y = r
        if next_x + r > bounds.width:
            next_x = bounds.width - r
        if next_y + r > bounds.height:
            next_y = bounds.height - r

        self.x = next_x
        self.y = next_y

    def randomize_direction(self, rng: RandomSource):
        """
        Picks a new random direction with a step length of at most `speed`.

        dx is drawn from [1, speed] and dy is the truncated remaining leg of
        the right triangle with hypotenuse `speed`. Each sign is then flipped
        with probability 1/2.
        """
        dx = rng.integer(1, self.speed + 1)
        dy = math.isqrt(self.speed * self.speed - dx * dx)
        if rng.boolean():
            dx = -dx
        if rng.boolean():
            dy = -dy
        self.dx, self.dy = dx, dy

    def set_radius(self, radius: float):
        # Range checks are the caller's policy (see ControlSurface).
        self.radius = float(radius)

    def toggle_run_state(self):
        """Flips between running and paused."""
        if self.run_state is RunState.RUNNING:
            self.run_state = RunState.PAUSED
        else:
            self.run_state = RunState.RUNNING
