# controls.py
"""
Maps user input to simulation commands.

The presentation layer translates its own events (mouse buttons) into
InputEvent values and hands them to a ControlSurface. The ControlSurface
owns the radius policy (step size and the allowed range) and issues the
corresponding broadcast command on the Simulation.
"""
import enum
import logging
from typing import Dict, Any

from constants import MIN_RADIUS, MAX_RADIUS, RADIUS_STEP
from simulation import Simulation

# --- Data Contracts ---
#
# class ControlSurface:
#   - __init__(self, simulation, min_radius=MIN_RADIUS, max_radius=MAX_RADIUS, radius_step=RADIUS_STEP):
#     - Invariants: Raises ValueError unless 0 < min_radius <= max_radius
#       and radius_step > 0.
#
#   - handle(self, event: InputEvent) -> None:
#     - PRIMARY: every radius shrinks by radius_step, never below min_radius.
#     - SECONDARY: every radius grows by radius_step, never above max_radius.
#     - OTHER: every particle toggles between running and paused.

class InputEvent(enum.Enum):
    PRIMARY = "primary"      # left click
    SECONDARY = "secondary"  # right click
    OTHER = "other"          # any other button


class ControlSurface:
    """
    Applies user commands to every particle of a Simulation.
    """
    def __init__(
        self,
        simulation: Simulation,
        min_radius: float = MIN_RADIUS,
        max_radius: float = MAX_RADIUS,
        radius_step: float = RADIUS_STEP,
    ):
        if not 0 < min_radius <= max_radius or radius_step <= 0:
            msg = (
                f"Configuration error: invalid radius policy "
                f"(min={min_radius}, max={max_radius}, step={radius_step})."
            )
            logging.critical(msg)
            raise ValueError(msg)
        self.simulation = simulation
        self.min_radius = min_radius
        self.max_radius = max_radius
        self.radius_step = radius_step

    @classmethod
    def from_params(cls, simulation: Simulation, params: Dict[str, Any]) -> "ControlSurface":
        """Builds the control surface from the simulation_parameters config section."""
        return cls(
            simulation,
            min_radius=params.get('min_radius', MIN_RADIUS),
            max_radius=params.get('max_radius', MAX_RADIUS),
            radius_step=params.get('radius_step', RADIUS_STEP),
        )

    def decrease_radius(self) -> int:
        return self.simulation.adjust_radius(-self.radius_step, self.min_radius, self.max_radius)

    def increase_radius(self) -> int:
        return self.simulation.adjust_radius(self.radius_step, self.min_radius, self.max_radius)

    def toggle_run_state(self):
        self.simulation.toggle_run_state()

    def handle(self, event: InputEvent):
        """Dispatches one input event to the matching command."""
        logging.debug(f"Input event received: {event.value}.")
        if event is InputEvent.PRIMARY:
            self.decrease_radius()
        elif event is InputEvent.SECONDARY:
            self.increase_radius()
        else:
            self.toggle_run_state()
